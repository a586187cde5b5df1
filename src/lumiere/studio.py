"""Studio context for Lumiere.

Composes the session stores, the key gate and the Veo client, and exposes the
user intents (create/delete/select character, submit prompt, select key).
One Studio is built per application; there is no module-level singleton.
"""

import asyncio
from typing import Optional

import structlog

from lumiere.models.character import Character
from lumiere.models.video import GeneratedVideo
from lumiere.repositories.character import CharacterRepository
from lumiere.repositories.video import VideoRepository
from lumiere.services.credentials import KeyGate
from lumiere.services.exceptions import CharacterNotFoundError
from lumiere.services.video_generation.veo_client import VeoVideoGenerator
from lumiere.workers.video_generation_worker import process_video_job

logger = structlog.get_logger(__name__)


class Studio:
    """Session-scoped application context.

    Example:
        studio = Studio(key_gate=gate, generator=generator)
        await studio.key_gate.check()
        hero = studio.create_character("Hero", [data_uri])
        studio.toggle_character(hero.id)
        video = studio.submit("walking through a neon city")
        # video is pending; a task is now polling Veo for it
    """

    def __init__(
        self,
        key_gate: KeyGate,
        generator: VeoVideoGenerator,
        characters: CharacterRepository | None = None,
        videos: VideoRepository | None = None,
    ):
        self.key_gate = key_gate
        self.generator = generator
        self.characters = characters if characters is not None else CharacterRepository()
        self.videos = videos if videos is not None else VideoRepository()
        self.selected_character_id: str | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def is_generating(self) -> bool:
        """True while any job is still pending."""
        return self.videos.count_in_flight() > 0

    # Characters

    def create_character(self, name: str, images: list[str]) -> Character | None:
        """Create a character from a name and encoded images.

        Blank names or an empty image list are ignored rather than reported.
        Only the first three images are kept.

        Returns:
            The new character, or None if the input was ignored
        """
        images = [image for image in images if image]
        if not name or not name.strip() or not images:
            return None
        return self.characters.add(Character(name=name, images=images))

    def delete_character(self, character_id: str) -> bool:
        """Delete a character, clearing the selection if it pointed at it.

        Jobs referencing the character keep their (now dangling) reference.
        """
        deleted = self.characters.delete(character_id)
        if deleted and self.selected_character_id == character_id:
            self.selected_character_id = None
        return deleted

    def toggle_character(self, character_id: str) -> str | None:
        """Select a character, or deselect it if it is already selected.

        Returns:
            The selected character id after the toggle (None when deselected)

        Raises:
            CharacterNotFoundError: If the character does not exist
        """
        if character_id not in self.characters:
            raise CharacterNotFoundError(f"Character {character_id} not found")

        if self.selected_character_id == character_id:
            self.selected_character_id = None
        else:
            self.selected_character_id = character_id
        return self.selected_character_id

    def character_name(self, video: GeneratedVideo) -> str | None:
        """Display name of a job's character ("unknown" once deleted)."""
        return self.characters.resolve_name(video.character_id)

    # Key selection

    def select_key(self, api_key: str | None = None) -> None:
        self.key_gate.select_key(api_key)

    # Generation

    def submit(self, prompt: str, character_id: Optional[str] = None) -> GeneratedVideo | None:
        """Register a pending job and start generating it in the background.

        Args:
            prompt: Scene description; blank prompts are ignored
            character_id: Character to attach; defaults to the current selection

        Returns:
            The pending job, or None if the prompt was blank

        Raises:
            KeyNotSelectedError: If no API key is selected
            CharacterNotFoundError: If an explicit character_id does not exist
        """
        if not prompt or not prompt.strip():
            return None

        self.key_gate.require_key()

        if character_id is not None:
            character = self.characters.get_by_id(character_id)
            if character is None:
                raise CharacterNotFoundError(f"Character {character_id} not found")
        else:
            character_id = self.selected_character_id
            character = self.characters.get_by_id(character_id) if character_id else None

        video = self.videos.add(GeneratedVideo(prompt=prompt, character_id=character_id))
        logger.info(
            "video.submitted",
            video_id=video.id,
            character_id=character_id,
            in_flight=self.videos.count_in_flight(),
        )

        task = asyncio.create_task(
            process_video_job(video, character, self.generator, self.videos, self.key_gate)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return video

    async def join(self) -> None:
        """Wait for every in-flight generation task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Abandon in-flight generation tasks.

        Jobs that were still pending stay pending; nothing is persisted.
        """
        pending = list(self._tasks)
        if pending:
            logger.info("studio.shutdown", abandoned_jobs=len(pending))
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
