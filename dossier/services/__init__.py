"""Normalization and persistence for roster records."""
