"""clipshot: relay clipboard screenshots to a local folder or an ssh host."""

__version__ = "0.3.0"
