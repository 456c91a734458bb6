"""Interactive navigation for educational diagrams."""

__version__ = "0.1.0"
