from .memory import InMemoryPlaylist

__all__ = ["InMemoryPlaylist"]
