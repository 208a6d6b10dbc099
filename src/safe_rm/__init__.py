"""safe-rm - Git-aware deletion gatekeeper for AI agents."""

__version__ = "0.4.0"
