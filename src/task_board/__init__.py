"""Three-column task board with a dense per-column ordering engine."""

__version__ = "0.1.0"
