"""Reporters — markdown context map and rich terminal output."""
