"""Personal body-metric tracking with linear trend projections."""

__version__ = "0.1.0"
