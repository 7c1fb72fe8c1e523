"""Racfella - trading psychology assistant with a conversational trading journal."""

__version__ = "0.1.0"
