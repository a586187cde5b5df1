"""Session and API key endpoints.

- GET /api/session - Key gate state, selection and generation indicator
- POST /api/session/key - Select an API key (optimistic, see KeyGate)
"""

import structlog
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from lumiere.api.dependencies import get_studio
from lumiere.studio import Studio

logger = structlog.get_logger()
router = APIRouter(prefix="/api/session", tags=["session"])


class SessionResponse(BaseModel):
    """Response model for session state."""

    key_state: str = Field(..., description="Key gate state (checking, missing, selected)")
    has_key: bool = Field(..., description="True if generation is currently allowed")
    key_error: str | None = Field(
        default=None,
        description="Message shown when the last generation rejected the key",
    )
    generating: bool = Field(..., description="True while any video is still pending")
    selected_character_id: str | None = Field(
        default=None,
        description="Character attached to new prompts by default",
    )


class SelectKeyRequest(BaseModel):
    """Request model for API key selection."""

    api_key: str | None = Field(
        default=None,
        description="New Gemini API key; omit to re-select the configured key",
    )


def build_session_response(studio: Studio) -> SessionResponse:
    gate = studio.key_gate
    return SessionResponse(
        key_state=gate.state.value,
        has_key=gate.has_key,
        key_error=gate.key_error,
        generating=studio.is_generating,
        selected_character_id=studio.selected_character_id,
    )


@router.get("", response_model=SessionResponse)
async def get_session(studio: Studio = Depends(get_studio)) -> SessionResponse:
    """Return key gate state and generation indicator."""
    return build_session_response(studio)


@router.post("/key", response_model=SessionResponse, status_code=status.HTTP_202_ACCEPTED)
async def select_key(
    request: SelectKeyRequest,
    studio: Studio = Depends(get_studio),
) -> SessionResponse:
    """Select an API key.

    The gate is opened immediately without validating the key. An invalid key
    is detected by the next generation, which closes the gate again and sets
    ``key_error``.
    """
    studio.select_key(request.api_key)
    logger.info("session.key_selected", key_provided=request.api_key is not None)
    return build_session_response(studio)
