"""Section data-processing pipeline for marketing-analytics reports."""

__version__ = "0.1.0"
