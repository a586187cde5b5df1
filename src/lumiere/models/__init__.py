"""In-memory session entities.

Nothing here is persisted; lifetime is the application session.
"""

from lumiere.models.character import MAX_REFERENCE_IMAGES, Character
from lumiere.models.video import GeneratedVideo, InvalidStateTransition, VideoStatus

__all__ = [
    "Character",
    "MAX_REFERENCE_IMAGES",
    "GeneratedVideo",
    "VideoStatus",
    "InvalidStateTransition",
]
