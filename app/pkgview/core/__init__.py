"""Core catalog, configuration and theming for pkgview."""
