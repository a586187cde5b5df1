"""GeneratedVideo entity - one prompt-to-video generation job."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class VideoStatus(str, Enum):
    """Generation job lifecycle status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = (VideoStatus.COMPLETED, VideoStatus.FAILED)


class InvalidStateTransition(Exception):
    """Raised when attempting an invalid video state transition."""

    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GeneratedVideo(BaseModel):
    """GeneratedVideo tracks one generation request from submission to result.

    Instances are immutable. State transitions return an updated copy that keeps
    the same ``id``, so the registry can swap it in by identity.

    ``character_id`` is a weak reference: the character may be deleted later and
    the job keeps pointing at it.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    prompt: str
    status: VideoStatus = VideoStatus.PENDING
    url: str = ""
    error: Optional[str] = None
    character_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def download_filename(self) -> str:
        return f"lumiere-scene-{self.id}.mp4"

    def mark_completed(self, url: str) -> "GeneratedVideo":
        """Transition from pending to completed.

        Args:
            url: Fetchable video URL (credential already appended)

        Returns:
            Updated copy with status completed and url set

        Raises:
            InvalidStateTransition: If current status is not pending
            ValueError: If url is empty
        """
        if self.status != VideoStatus.PENDING:
            raise InvalidStateTransition(
                f"Cannot mark completed from {self.status.value}. Video must be in pending state."
            )
        if not url:
            raise ValueError("url is required")
        return self.model_copy(update={"status": VideoStatus.COMPLETED, "url": url})

    def mark_failed(self, error: str) -> "GeneratedVideo":
        """Transition from pending to failed.

        Args:
            error: Human-readable failure message shown on the gallery card

        Returns:
            Updated copy with status failed and error set

        Raises:
            InvalidStateTransition: If current status is already terminal
        """
        if self.status != VideoStatus.PENDING:
            raise InvalidStateTransition(
                f"Cannot mark failed from terminal state {self.status.value}."
            )
        return self.model_copy(
            update={"status": VideoStatus.FAILED, "error": error or "Failed to generate video"}
        )
