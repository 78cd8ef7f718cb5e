"""dualmod: build-time helpers for publishing a library as both ESM and CommonJS."""

__version__ = "0.1.0"
