"""pkgview - Inspect and upgrade npm, Homebrew and pip packages."""

__version__ = "0.1.0"
