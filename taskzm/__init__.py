"""TaskZM backend: task API with recurring series expansion."""

__version__ = "1.0.0"
