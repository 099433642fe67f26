"""State management modules."""

from bayangida.state.manager import StateManager
from bayangida.state.store import DocumentStore

__all__ = ["StateManager", "DocumentStore"]
