"""Tracing and metrics setup."""
