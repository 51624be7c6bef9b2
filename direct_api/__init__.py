"""Direct API: read-only "My Challenges" query service."""

__version__ = "0.1.0"
