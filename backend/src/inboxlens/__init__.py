"""Conversation and analytics API over logged Instagram webhook interactions."""

__version__ = "0.1.0"
