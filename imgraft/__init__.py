"""Image asset helpers: background removal, trimming, reference loading, model aliases and JSON output."""

__version__ = "0.1.0"