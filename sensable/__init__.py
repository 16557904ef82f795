"""Sensable scheduler: periodic sensor feed sync with favourite propagation."""

__version__ = "0.1.0"
