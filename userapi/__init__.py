"""A JSON HTTP service for authenticating and managing users stored in MongoDB."""

__version__ = "0.1.0"