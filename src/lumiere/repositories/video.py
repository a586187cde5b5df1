"""GeneratedVideo repository for Lumiere Studio.

Provides data access methods for generation jobs held in session memory.
"""

from lumiere.models.video import GeneratedVideo, VideoStatus


class VideoRepository:
    """Ordered in-memory registry of generation jobs, newest first.

    Ordering is by submission, never by completion. Jobs are only ever inserted
    at the head or replaced by identity, so interleaved completions from
    concurrent tasks on one event loop cannot clobber each other.
    """

    def __init__(self) -> None:
        self._videos: list[GeneratedVideo] = []

    def __len__(self) -> int:
        return len(self._videos)

    def add(self, video: GeneratedVideo) -> GeneratedVideo:
        """Insert a new job at the head of the list.

        Args:
            video: Job to insert (normally pending)

        Returns:
            The inserted job

        Raises:
            ValueError: If a job with the same id is already registered
        """
        if self._index_of(video.id) is not None:
            raise ValueError(f"Video {video.id} already exists")
        self._videos.insert(0, video)
        return video

    def get_by_id(self, video_id: str) -> GeneratedVideo | None:
        """Retrieve job by id.

        Args:
            video_id: Job's unique identifier

        Returns:
            GeneratedVideo if found, None otherwise
        """
        index = self._index_of(video_id)
        return self._videos[index] if index is not None else None

    def list_all(self) -> list[GeneratedVideo]:
        """Return all jobs, newest submission first."""
        return list(self._videos)

    def replace(self, video: GeneratedVideo) -> GeneratedVideo:
        """Swap in an updated copy of a job, keeping its position.

        Args:
            video: Updated job; its id must already be registered

        Returns:
            The stored job

        Raises:
            KeyError: If no job with that id exists
        """
        index = self._index_of(video.id)
        if index is None:
            raise KeyError(video.id)
        self._videos[index] = video
        return video

    def count_in_flight(self) -> int:
        """Number of jobs still waiting for a result."""
        return sum(1 for video in self._videos if video.status == VideoStatus.PENDING)

    def _index_of(self, video_id: str) -> int | None:
        for index, video in enumerate(self._videos):
            if video.id == video_id:
                return index
        return None
