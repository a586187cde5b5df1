"""Conversion of character images into Veo reference images.

Character images arrive as base64 data URIs. Veo wants raw bytes plus a media
type, tagged as ASSET references so the character's look carries across shots.
"""

import base64
import re

from google.genai import types

from lumiere.models.character import MAX_REFERENCE_IMAGES, Character

DEFAULT_MIME_TYPE = "image/png"

_DATA_URI_HEADER = re.compile(r"^data:[^;,]*;base64,")
_IMAGE_MIME_TYPE = re.compile(r"^data:(image/[a-z]+);base64,")
_WHITESPACE = re.compile(r"\s+")


def strip_data_uri_header(image: str) -> str:
    """Remove a leading ``data:<type>;base64,`` header if present."""
    return _DATA_URI_HEADER.sub("", image, count=1)


def get_mime_type(image: str) -> str:
    """Media type from an ``image/<type>`` data URI header, or DEFAULT_MIME_TYPE."""
    match = _IMAGE_MIME_TYPE.match(image)
    return match.group(1) if match else DEFAULT_MIME_TYPE


def decode_image(image: str) -> tuple[bytes, str]:
    """Split an encoded image into (raw bytes, media type).

    Line breaks and other whitespace in the payload are ignored.

    Raises:
        binascii.Error: If the payload is not valid base64
    """
    payload = _WHITESPACE.sub("", strip_data_uri_header(image))
    return base64.b64decode(payload, validate=True), get_mime_type(image)


def build_reference_images(
    character: Character | None,
) -> list[types.VideoGenerationReferenceImage]:
    """Reference image payload for a character (empty without character or images)."""
    if character is None or not character.images:
        return []

    references = []
    for image in character.images[:MAX_REFERENCE_IMAGES]:
        image_bytes, mime_type = decode_image(image)
        references.append(
            types.VideoGenerationReferenceImage(
                image=types.Image(image_bytes=image_bytes, mime_type=mime_type),
                reference_type=types.VideoGenerationReferenceType.ASSET,
            )
        )
    return references
