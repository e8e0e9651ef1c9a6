"""Rendering helpers for the grid life simulation."""
