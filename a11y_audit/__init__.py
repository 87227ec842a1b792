"""Accessibility audit reports from automated scan results."""

__version__ = "0.1.0"
