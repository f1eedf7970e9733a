"""Travel booking API: registration, login, and token-based session renewal."""

__version__ = "0.1.0"
