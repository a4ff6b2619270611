"""AI Router: tool catalog, generation proxy and API client."""

__version__ = "0.1.0"
