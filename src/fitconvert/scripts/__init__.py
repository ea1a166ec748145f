"""
fitconvert Scripts Package

This package contains command-line entry points.

Available scripts:
- convert_fit: Convert a FIT activity file to SRT subtitles or JSON
"""

__all__ = ["convert_fit"]
