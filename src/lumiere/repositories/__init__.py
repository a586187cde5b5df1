"""Repository layer for Lumiere Studio.

Session-memory stores for characters and generation jobs.
No base classes - each repository is self-contained.
"""

from lumiere.repositories.character import CharacterRepository
from lumiere.repositories.video import VideoRepository

__all__ = [
    "CharacterRepository",
    "VideoRepository",
]
