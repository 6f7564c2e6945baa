"""In-memory sales task manager with ROI analytics."""

__version__ = "0.1.0"
