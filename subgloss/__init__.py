"""Dictionary-based subtitle annotation for language learners."""

__version__ = "0.4.0"

__all__ = ["__version__"]
