"""metad - seismic station metadata pipeline daemon."""

__version__ = "0.1.0"
