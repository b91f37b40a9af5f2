"""Address families, hardware types, /proc parsers and route tables for Linux networking."""

__version__ = "0.1.0"