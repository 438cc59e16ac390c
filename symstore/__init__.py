"""Publish executables and debug info files under symbol server keys."""

__version__ = "0.1.0"
