"""Prospect intelligence: discover, score and draft outreach for candidate organizations."""

__version__ = "0.1.0"
