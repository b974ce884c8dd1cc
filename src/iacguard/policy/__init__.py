"""Exit status policy."""
