"""Post-scan stage: configuration, tracker and the result finalizer."""

from .config import ScanParams, load_scan_params
from .post_scan import Client, mask_results, should_exit
from .tracker import Tracker

__all__ = [
    "Client",
    "ScanParams",
    "Tracker",
    "load_scan_params",
    "mask_results",
    "should_exit",
]
