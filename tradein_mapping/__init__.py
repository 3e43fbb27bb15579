"""Trade-in field mapping and template transformation engine."""

__version__ = "0.1.0"
