"""Multi-tenant session bootstrap and routing decisions."""

__version__ = "0.1.0"
