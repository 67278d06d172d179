"""Media sync and publish pipeline for markdown content sites."""

__version__ = "0.1.0"
