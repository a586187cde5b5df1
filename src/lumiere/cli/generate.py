"""CLI command for one-shot video generation.

Usage:
    python -m lumiere.cli [OPTIONS] PROMPT

Examples:
    # Plain text-to-video
    python -m lumiere.cli "a cat walking"

    # Keep a character consistent using up to 3 reference images
    python -m lumiere.cli "walking through a neon city" --image hero1.png --image hero2.png

    # Download the result instead of only printing the URL
    python -m lumiere.cli "a cat walking" --output cat.mp4

    # Verbose logging
    python -m lumiere.cli "a cat walking" -v
"""

import asyncio
import base64
import mimetypes
import sys
from argparse import ArgumentParser, Namespace
from pathlib import Path

import httpx
import structlog

from lumiere.core.config import Settings, configure_logging
from lumiere.models.character import MAX_REFERENCE_IMAGES, Character
from lumiere.services.credentials import SettingsCredentialProvider
from lumiere.services.exceptions import CREDENTIAL_ERROR_MESSAGE, CredentialError, GenerationError
from lumiere.services.video_generation.veo_client import VeoVideoGenerator

logger = structlog.get_logger()

EXIT_OK = 0
EXIT_GENERATION_FAILED = 1
EXIT_CREDENTIAL = 2


def parse_args(argv: list[str] | None = None) -> Namespace:
    """Parse command-line arguments."""
    parser = ArgumentParser(
        description="Generate a video with Veo",
        epilog="Reads API_KEY (and other settings) from the environment or .env",
    )

    parser.add_argument("prompt", help="Scene description")

    parser.add_argument(
        "--image",
        dest="images",
        action="append",
        default=[],
        type=Path,
        help=f"Reference image file (repeatable, first {MAX_REFERENCE_IMAGES} are used)",
    )

    parser.add_argument(
        "--name",
        default="cli-character",
        help="Character name attached to the reference images",
    )

    parser.add_argument(
        "--output",
        type=Path,
        help="Download the generated video to this file",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    return parser.parse_args(argv)


def encode_image_file(path: Path) -> str:
    """Read an image file into a base64 data URI."""
    mime_type = mimetypes.guess_type(path.name)[0] or "image/png"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def build_character(name: str, image_paths: list[Path]) -> Character | None:
    """Transient character from image files (None without images)."""
    if not image_paths:
        return None
    return Character(name=name, images=[encode_image_file(p) for p in image_paths])


async def download_video(url: str, output: Path) -> int:
    """Download a video to disk.

    Returns:
        Number of bytes written
    """
    async with httpx.AsyncClient(timeout=120.0, follow_redirects=True) as client:
        response = await client.get(url)
        response.raise_for_status()
        output.write_bytes(response.content)
    return len(response.content)


async def async_main(argv: list[str] | None = None) -> int:
    """Main CLI entry point (async).

    Returns:
        Exit code: 0 (success), 1 (generation failed), 2 (missing or invalid API key)
    """
    args = parse_args(argv)

    settings = Settings()  # type: ignore[call-arg]

    if args.verbose:
        settings.log_level = "DEBUG"

    configure_logging(settings)

    if not settings.api_key:
        print("Error: API_KEY is not set", file=sys.stderr)
        return EXIT_CREDENTIAL

    if args.images and not args.name.strip():
        print("Error: Character name must not be blank", file=sys.stderr)
        return EXIT_GENERATION_FAILED

    try:
        character = build_character(args.name, args.images)
    except OSError as e:
        print(f"Error: Cannot read reference image: {e}", file=sys.stderr)
        return EXIT_GENERATION_FAILED

    generator = VeoVideoGenerator(
        credentials=SettingsCredentialProvider(settings.api_key),
        model=settings.veo_model,
        poll_interval_seconds=settings.poll_interval_seconds,
        poll_timeout_seconds=settings.poll_timeout_seconds,
    )

    logger.info(
        "cli.started",
        model=settings.veo_model,
        reference_images=len(character.images) if character else 0,
    )

    try:
        url = await generator.generate_video(args.prompt, character)
    except CredentialError as e:
        logger.error("cli.credential_error", error=str(e))
        print(f"Error: {CREDENTIAL_ERROR_MESSAGE}", file=sys.stderr)
        return EXIT_CREDENTIAL
    except GenerationError as e:
        logger.error("cli.generation_failed", error=str(e), error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_GENERATION_FAILED

    print(url)

    if args.output:
        try:
            size = await download_video(url, args.output)
        except httpx.HTTPError as e:
            logger.error("cli.download_failed", error=str(e))
            print(f"Error: Download failed: {e}", file=sys.stderr)
            return EXIT_GENERATION_FAILED
        logger.info("cli.downloaded", path=str(args.output), size_bytes=size)

    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Synchronous CLI entry point."""
    return asyncio.run(async_main(argv))


if __name__ == "__main__":
    sys.exit(main())
