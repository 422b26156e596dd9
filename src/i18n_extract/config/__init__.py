"""Extraction options."""
