# contact_scout/__init__.py
"""
ContactScout package initializer.
Defines package version; the CLI lives in :mod:`contact_scout.cli`
(console script ``contact-scout`` -> :func:`contact_scout.cli.main`).
"""
__version__ = "0.1.0"

__all__ = ["__version__"]
