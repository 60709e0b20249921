"""jumpmeter: jump detection and metrics from 3-axis acceleration streams."""

__version__ = "0.1.0"
