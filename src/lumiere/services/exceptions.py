"""Service error hierarchy for video generation and studio operations.

This module defines the exception hierarchy for service-level errors:
- ServiceError: Base for all service errors
- GenerationError: Any failure of the start/poll protocol (never retried)
- CredentialError: The generation service rejected the selected API key
- KeyNotSelectedError / CharacterNotFoundError: Rejected studio intents
"""

# Message fragment the Gemini API returns when the key's project cannot be resolved.
CREDENTIAL_ERROR_PATTERN = "Requested entity was not found"

CREDENTIAL_ERROR_MESSAGE = "API Key Invalid or Project Not Found. Please select a valid key."


class ServiceError(Exception):
    """Base exception for all service errors."""

    pass


class GenerationError(ServiceError):
    """Video generation failed.

    Examples:
    - Start call rejected (bad request, quota)
    - Status refresh failed mid-poll
    - Completed operation without a video

    No distinction is made between transient and permanent causes; the job is
    marked failed and the user may submit again.
    """

    pass


class NoVideoResultError(GenerationError):
    """Operation completed but carried no generated video URI."""

    pass


class PollTimeoutError(GenerationError):
    """Operation did not complete within the configured poll timeout."""

    pass


class CredentialError(GenerationError):
    """The generation service could not resolve the API key's project.

    Resets the key gate to "no credential" in addition to failing the job.
    """

    pass


class KeyNotSelectedError(ServiceError):
    """Generation requested while no API key is selected."""

    pass


class CharacterNotFoundError(ServiceError):
    """Character id does not exist in the character store."""

    pass
