"""Feature Launcher — turns feature descriptors into installation plans."""

__version__ = "0.1.0"
