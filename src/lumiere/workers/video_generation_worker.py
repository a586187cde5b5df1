"""Video generation worker for submitted prompts.

Takes one pending job, runs the Veo submit-then-poll protocol and replaces the
job with its terminal state. Every submission gets its own task running
``process_video_job``; tasks interleave on the event loop without locks because
each one only ever replaces its own job by id.

Failures never escape the worker:
- CredentialError: job failed with the credential message, key gate invalidated
- GenerationError: job failed with the service's message
- anything else: job failed, logged with its type

There is no retry. The user submits again.
"""

import time
from typing import Optional

import structlog

from lumiere.models.character import Character
from lumiere.models.video import GeneratedVideo
from lumiere.repositories.video import VideoRepository
from lumiere.services.credentials import KeyGate
from lumiere.services.exceptions import (
    CREDENTIAL_ERROR_MESSAGE,
    CredentialError,
    GenerationError,
)
from lumiere.services.video_generation.veo_client import VeoVideoGenerator

logger = structlog.get_logger(__name__)


async def process_video_job(
    video: GeneratedVideo,
    character: Optional[Character],
    generator: VeoVideoGenerator,
    videos: VideoRepository,
    key_gate: KeyGate,
) -> GeneratedVideo:
    """Drive a single pending job to completed or failed.

    Workflow:
    1. Call the generator with the job's prompt and character
    2. On success: replace job with completed copy carrying the URL
    3. On CredentialError: invalidate key gate, fail job with credential message
    4. On any other error: fail job with the error message

    Args:
        video: Pending job already registered in ``videos``
        character: Character snapshot taken at submission (None if no character)
        generator: Veo client
        videos: Registry holding the job
        key_gate: Gate reset when the key is rejected

    Returns:
        The job in its terminal state
    """
    start_time = time.time()

    logger.info(
        "video.generation.started",
        video_id=video.id,
        character_id=video.character_id,
    )

    try:
        url = await generator.generate_video(video.prompt, character)

    except CredentialError as e:
        key_gate.invalidate(CREDENTIAL_ERROR_MESSAGE)
        logger.error(
            "video.generation.failed",
            video_id=video.id,
            error_type="CredentialError",
            error_message=str(e),
        )
        return _finish(videos, video.mark_failed(CREDENTIAL_ERROR_MESSAGE))

    except GenerationError as e:
        logger.error(
            "video.generation.failed",
            video_id=video.id,
            error_type=type(e).__name__,
            error_message=str(e),
        )
        return _finish(videos, video.mark_failed(str(e)))

    except Exception as e:
        logger.error(
            "video.generation.failed",
            video_id=video.id,
            error_type=type(e).__name__,
            error_message=str(e),
            exc_info=e,
        )
        return _finish(videos, video.mark_failed(str(e)))

    completed = _finish(videos, video.mark_completed(url))
    logger.info(
        "video.generation.succeeded",
        video_id=video.id,
        duration_seconds=time.time() - start_time,
    )
    return completed


def _finish(videos: VideoRepository, video: GeneratedVideo) -> GeneratedVideo:
    return videos.replace(video)
