"""Video gallery API endpoints.

- GET /api/videos - Gallery, newest submission first
- GET /api/videos/{video_id} - Single job (poll this for the result)
- POST /api/videos - Submit a prompt; returns the pending job immediately
"""

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from lumiere.api.dependencies import get_studio
from lumiere.models.video import GeneratedVideo
from lumiere.services.exceptions import CharacterNotFoundError, KeyNotSelectedError
from lumiere.studio import Studio

logger = structlog.get_logger()
router = APIRouter(prefix="/api/videos", tags=["videos"])


# Request/Response Models


class SubmitVideoRequest(BaseModel):
    """Request model for prompt submission."""

    prompt: str = Field(..., description="Scene description", min_length=1)
    character_id: str | None = Field(
        default=None,
        description="Character to attach; defaults to the session's selected character",
    )

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Prompt cannot be blank")
        return v


class VideoDTO(BaseModel):
    """Data Transfer Object for gallery entries."""

    id: str = Field(..., description="Job identifier")
    prompt: str = Field(..., description="Submitted prompt")
    status: str = Field(..., description="Job status (pending, completed, failed)")
    url: str = Field(default="", description="Playable URL (empty until completed)")
    error: str | None = Field(default=None, description="Failure message (null unless failed)")
    character_id: str | None = Field(default=None, description="Attached character, if any")
    character_name: str | None = Field(
        default=None,
        description="Character display name; 'unknown' if the character was deleted",
    )
    download_filename: str = Field(..., description="Suggested file name for downloads")
    created_at: datetime = Field(..., description="Submission time (UTC)")

    @classmethod
    def from_video(cls, video: GeneratedVideo, character_name: str | None) -> "VideoDTO":
        return cls(
            id=video.id,
            prompt=video.prompt,
            status=video.status.value,
            url=video.url,
            error=video.error,
            character_id=video.character_id,
            character_name=character_name,
            download_filename=video.download_filename,
            created_at=video.created_at,
        )


# API Endpoints


@router.get("", response_model=list[VideoDTO])
async def list_videos(studio: Studio = Depends(get_studio)) -> list[VideoDTO]:
    """Gallery of all jobs this session, newest submission first."""
    return [
        VideoDTO.from_video(video, studio.character_name(video))
        for video in studio.videos.list_all()
    ]


@router.get("/{video_id}", response_model=VideoDTO)
async def get_video(video_id: str, studio: Studio = Depends(get_studio)) -> VideoDTO:
    """Return one job."""
    video = studio.videos.get_by_id(video_id)
    if video is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Video {video_id} not found",
        )
    return VideoDTO.from_video(video, studio.character_name(video))


@router.post("", response_model=VideoDTO, status_code=status.HTTP_202_ACCEPTED)
async def submit_video(
    request: SubmitVideoRequest,
    studio: Studio = Depends(get_studio),
) -> VideoDTO:
    """Submit a prompt for generation.

    The job is registered as pending and returned at once; generation runs in
    the background. Poll GET /api/videos/{id} for the result.

    Returns:
        202: Pending job
        403: No API key selected
        404: Explicit character_id does not exist
        422: Blank prompt
    """
    try:
        video = studio.submit(request.prompt, request.character_id)
    except KeyNotSelectedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except CharacterNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    if video is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Prompt cannot be blank",
        )

    return VideoDTO.from_video(video, studio.character_name(video))
