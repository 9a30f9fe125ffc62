"""Capture set resolution."""

from tabletrace.capture.resolver import CaptureSetResolver, TableLister, resolve_captured_tables

__all__ = [
    "CaptureSetResolver",
    "TableLister",
    "resolve_captured_tables",
]
