"""One-pass URL availability checks with chat notifications on status transitions."""

__version__ = "0.1.0"
