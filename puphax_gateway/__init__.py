"""PUPHAX drug registry gateway."""

__version__ = "1.0.0"
