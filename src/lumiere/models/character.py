"""Character entity - named visual identity with reference images."""

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

MAX_REFERENCE_IMAGES = 3


class Character(BaseModel):
    """Character is a reusable visual identity attached to generation requests.

    Images are base64 data URIs (``data:image/png;base64,...``) held in memory
    only. At most three are kept; extra images are dropped, not rejected.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str = Field(min_length=1)
    images: tuple[str, ...] = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject names that are blank after trimming."""
        if not v.strip():
            raise ValueError("Character name cannot be blank")
        return v

    @field_validator("images", mode="before")
    @classmethod
    def keep_first_images(cls, v):
        """Keep only the first MAX_REFERENCE_IMAGES images, dropping empty entries."""
        if isinstance(v, (list, tuple)):
            return tuple(image for image in v if image)[:MAX_REFERENCE_IMAGES]
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def thumbnail(self) -> str:
        """First reference image, or empty string."""
        return self.images[0] if self.images else ""
