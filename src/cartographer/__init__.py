"""cartographer — semantic context maps for codebases, refreshed incrementally."""

__version__ = "0.1.0"
