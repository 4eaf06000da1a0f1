"""Data models for pkgview.

This module exports the core data structures used throughout the application.
"""

from pkgview.models.package import Package, PackageManager

__all__ = ["Package", "PackageManager"]
