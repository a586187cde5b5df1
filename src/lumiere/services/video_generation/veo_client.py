"""Veo video generation client with error classification.

Drives the submit-then-poll protocol of the Gemini API:

1. ``models.generate_videos`` starts a long-running operation
2. ``operations.get`` is polled at a fixed interval until ``done``
3. the first generated video's URI is returned with the API key appended,
   because the file endpoint requires an authenticated fetch
"""

from typing import Any, Callable, Optional, Protocol

import structlog
from google import genai
from google.genai import types

from lumiere.core.config import DEFAULT_VEO_MODEL
from lumiere.models.character import Character
from lumiere.services.credentials import CredentialProvider
from lumiere.services.exceptions import (
    CREDENTIAL_ERROR_PATTERN,
    CredentialError,
    GenerationError,
    NoVideoResultError,
)
from lumiere.services.polling import poll_until_done
from lumiere.services.video_generation.reference_images import build_reference_images

logger = structlog.get_logger(__name__)

# Generation policy, not user-configurable
NUMBER_OF_VIDEOS = 1
RESOLUTION = "720p"
ASPECT_RATIO = "16:9"  # required by Veo 3.1 when reference images are attached

DEFAULT_POLL_INTERVAL_SECONDS = 5.0


class VideoService(Protocol):
    """The two calls of the generation service the client relies on."""

    async def start_generation(
        self, model: str, prompt: str, config: types.GenerateVideosConfig
    ) -> Any: ...

    async def refresh_operation(self, operation: Any) -> Any: ...


class GenAIVideoService:
    """VideoService backed by the google-genai async client."""

    def __init__(self, api_key: str):
        """Initialize the SDK client.

        Args:
            api_key: Gemini API key used for every call made by this instance
        """
        self.client = genai.Client(api_key=api_key)

    async def start_generation(
        self, model: str, prompt: str, config: types.GenerateVideosConfig
    ) -> types.GenerateVideosOperation:
        return await self.client.aio.models.generate_videos(
            model=model,
            prompt=prompt,
            config=config,
        )

    async def refresh_operation(
        self, operation: types.GenerateVideosOperation
    ) -> types.GenerateVideosOperation:
        return await self.client.aio.operations.get(operation)


def classify_message(message: str) -> GenerationError:
    """Classify a failure message into the generation error taxonomy.

    Classification rules:
        - "Requested entity was not found" → CredentialError (key or project invalid)
        - Anything else → GenerationError
    """
    if CREDENTIAL_ERROR_PATTERN.lower() in message.lower():
        return CredentialError(message)
    return GenerationError(message)


def classify_error(exception: Exception) -> GenerationError:
    """Classify an exception raised by the SDK or network layer.

    Args:
        exception: Original exception

    Returns:
        Classified GenerationError subclass instance
    """
    if isinstance(exception, GenerationError):
        return exception
    return classify_message(str(exception) or type(exception).__name__)


def build_generation_config(character: Optional[Character] = None) -> types.GenerateVideosConfig:
    """Fixed generation config plus the character's reference images, if any."""
    reference_images = build_reference_images(character)

    return types.GenerateVideosConfig(
        number_of_videos=NUMBER_OF_VIDEOS,
        resolution=RESOLUTION,
        aspect_ratio=ASPECT_RATIO,
        reference_images=reference_images or None,
    )


def extract_video_uri(operation: Any) -> str | None:
    """URI of the first generated video in a completed operation, if any."""
    response = getattr(operation, "response", None)
    generated_videos = getattr(response, "generated_videos", None) or []
    if not generated_videos:
        return None
    video = getattr(generated_videos[0], "video", None)
    return getattr(video, "uri", None) or None


def _operation_error_message(operation: Any) -> str | None:
    error = getattr(operation, "error", None)
    if not error:
        return None
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(error)


def append_api_key(uri: str, api_key: str) -> str:
    """Authenticated download URL for a generated video.

    Veo file URIs already carry a query string (``...:download?alt=media``), so
    the key is appended with ``&``.
    """
    return f"{uri}&key={api_key}"


class VeoVideoGenerator:
    """Stateless video generation client.

    A fresh service (and SDK client) is built for every call from the
    credential provider's current key, so a newly selected key takes effect on
    the next generation without re-initialising anything.
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        model: str = DEFAULT_VEO_MODEL,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        poll_timeout_seconds: float | None = None,
        service_factory: Callable[[str], VideoService] = GenAIVideoService,
    ):
        self.credentials = credentials
        self.model = model
        self.poll_interval_seconds = poll_interval_seconds
        self.poll_timeout_seconds = poll_timeout_seconds
        self.service_factory = service_factory

    async def generate_video(self, prompt: str, character: Optional[Character] = None) -> str:
        """Generate a video and return a directly fetchable URL.

        Args:
            prompt: Scene description
            character: Optional character whose images (max 3) are attached as
                ASSET references

        Returns:
            Video URL with the API key appended

        Raises:
            CredentialError: Service could not resolve the key's project
            NoVideoResultError: Operation completed without a video URI
            GenerationError: Any other start/poll failure
        """
        api_key = self.credentials.current_key()
        service = self.service_factory(api_key)

        try:
            config = build_generation_config(character)

            logger.info(
                "video.request.submitted",
                model=self.model,
                character_id=character.id if character else None,
                reference_images=len(config.reference_images or []),
            )

            operation = await service.start_generation(self.model, prompt, config)
            operation = await poll_until_done(
                operation,
                refresh=service.refresh_operation,
                is_done=lambda op: bool(getattr(op, "done", False)),
                interval_seconds=self.poll_interval_seconds,
                timeout_seconds=self.poll_timeout_seconds,
            )

            error_message = _operation_error_message(operation)
            if error_message:
                raise classify_message(error_message)

            video_uri = extract_video_uri(operation)
            if not video_uri:
                raise NoVideoResultError("No video URI returned from generation.")

        except GenerationError:
            raise

        except Exception as e:
            # SDK, network or payload decoding errors
            raise classify_error(e) from e

        return append_api_key(video_uri, api_key)
