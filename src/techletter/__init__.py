"""Techletter - TechCrunch articles rewritten as newsletters."""

__version__ = "0.1.0"
