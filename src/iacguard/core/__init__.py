"""Core data structures: findings, summary, redaction and errors."""
