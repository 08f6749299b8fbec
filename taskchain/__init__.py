"""Role-hierarchical task assignment and tracking."""

__version__ = "0.1.0"
