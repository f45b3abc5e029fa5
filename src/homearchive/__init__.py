"""Home archive book search."""

__version__ = "0.1.0"
