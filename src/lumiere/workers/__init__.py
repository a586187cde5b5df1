"""Background workers for async processing tasks."""

from lumiere.workers.video_generation_worker import process_video_job

__all__ = [
    "process_video_job",
]
