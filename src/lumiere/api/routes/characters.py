"""Character library API endpoints.

- GET /api/characters - List characters in creation order
- POST /api/characters - Create a character from a name and up to 3 images
- DELETE /api/characters/{character_id} - Delete a character
- POST /api/characters/{character_id}/select - Toggle the selected character

Images are base64 data URIs, the format a browser FileReader produces.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field, field_validator

from lumiere.api.dependencies import get_studio
from lumiere.models.character import Character
from lumiere.services.exceptions import CharacterNotFoundError
from lumiere.studio import Studio

logger = structlog.get_logger()
router = APIRouter(prefix="/api/characters", tags=["characters"])


# Request/Response Models


class CreateCharacterRequest(BaseModel):
    """Request model for character creation."""

    name: str = Field(..., description="Display name", min_length=1, max_length=100)
    images: list[str] = Field(
        ...,
        description="Reference images as data URIs; only the first 3 are kept",
        min_length=1,
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Character name cannot be blank")
        return v

    @field_validator("images")
    @classmethod
    def validate_images(cls, v: list[str]) -> list[str]:
        if not any(v):
            raise ValueError("At least one reference image is required")
        return v


class CharacterDTO(BaseModel):
    """Data Transfer Object for characters in API responses."""

    id: str = Field(..., description="Character identifier")
    name: str = Field(..., description="Display name")
    images: list[str] = Field(..., description="Reference images (max 3)")
    thumbnail: str = Field(..., description="First reference image, or empty string")
    selected: bool = Field(..., description="True if attached to new prompts by default")

    @classmethod
    def from_character(cls, character: Character, selected_id: str | None) -> "CharacterDTO":
        return cls(
            id=character.id,
            name=character.name,
            images=list(character.images),
            thumbnail=character.thumbnail,
            selected=character.id == selected_id,
        )


class SelectionResponse(BaseModel):
    """Response model for selection toggles."""

    selected_character_id: str | None = Field(
        default=None,
        description="Selected character after the toggle (null when deselected)",
    )


# API Endpoints


@router.get("", response_model=list[CharacterDTO])
async def list_characters(studio: Studio = Depends(get_studio)) -> list[CharacterDTO]:
    """List all characters, oldest first."""
    return [
        CharacterDTO.from_character(character, studio.selected_character_id)
        for character in studio.characters.list_all()
    ]


@router.post("", response_model=CharacterDTO, status_code=status.HTTP_201_CREATED)
async def create_character(
    request: CreateCharacterRequest,
    studio: Studio = Depends(get_studio),
) -> CharacterDTO:
    """Create a character.

    Returns:
        201: Created character
        422: Blank name or no images
    """
    character = studio.create_character(request.name, request.images)
    if character is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Character requires a name and at least one image",
        )
    return CharacterDTO.from_character(character, studio.selected_character_id)


@router.delete("/{character_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_character(
    character_id: str,
    studio: Studio = Depends(get_studio),
) -> Response:
    """Delete a character. Videos generated with it are kept."""
    if not studio.delete_character(character_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Character {character_id} not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{character_id}/select", response_model=SelectionResponse)
async def toggle_character(
    character_id: str,
    studio: Studio = Depends(get_studio),
) -> SelectionResponse:
    """Select a character, or deselect it if it is already selected."""
    try:
        selected = studio.toggle_character(character_id)
    except CharacterNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return SelectionResponse(selected_character_id=selected)
