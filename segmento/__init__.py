"""Caption-driven video segmentation service."""

__version__ = "0.1.0"
