"""Dossier console: roster API and map frontend for personnel records."""

__version__ = "0.1.0"
