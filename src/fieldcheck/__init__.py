"""fieldcheck - declarative field validation with filters and entity binding."""

__version__ = "0.1.0"
