"""Roster routes."""
