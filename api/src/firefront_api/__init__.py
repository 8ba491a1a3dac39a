"""FastAPI service for the firefront spread animator."""

__version__ = "1.0.0"
