"""Provider registry: a normalized catalog of externally hosted models."""

__version__ = "0.1.0"
