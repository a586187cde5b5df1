"""Character repository for Lumiere Studio.

Provides data access methods for Character entities held in session memory.
"""

import structlog

from lumiere.models.character import Character

logger = structlog.get_logger(__name__)

UNKNOWN_CHARACTER_NAME = "unknown"


class CharacterRepository:
    """In-memory store of user-defined characters, in creation order.

    Characters are created and deleted, never updated.
    """

    def __init__(self) -> None:
        self._characters: dict[str, Character] = {}

    def __len__(self) -> int:
        return len(self._characters)

    def __contains__(self, character_id: object) -> bool:
        return character_id in self._characters

    def add(self, character: Character) -> Character:
        """Store a new character.

        Args:
            character: Character entity to store

        Returns:
            The stored character

        Raises:
            ValueError: If a character with the same id already exists
        """
        if character.id in self._characters:
            raise ValueError(f"Character {character.id} already exists")
        self._characters[character.id] = character
        logger.info(
            "character.created",
            character_id=character.id,
            image_count=len(character.images),
        )
        return character

    def get_by_id(self, character_id: str) -> Character | None:
        """Retrieve character by id.

        Args:
            character_id: Character's unique identifier

        Returns:
            Character if found, None otherwise
        """
        return self._characters.get(character_id)

    def list_all(self) -> list[Character]:
        """Return all characters, oldest first."""
        return list(self._characters.values())

    def delete(self, character_id: str) -> bool:
        """Delete a character.

        Jobs referencing the character are not touched; their reference simply
        stops resolving.

        Returns:
            True if the character existed, False otherwise
        """
        removed = self._characters.pop(character_id, None)
        if removed is None:
            return False
        logger.info("character.deleted", character_id=character_id)
        return True

    def resolve_name(self, character_id: str | None) -> str | None:
        """Resolve a job's character reference to a display name.

        Returns:
            None when there is no reference, "unknown" when the reference dangles,
            otherwise the character's name
        """
        if character_id is None:
            return None
        character = self._characters.get(character_id)
        return character.name if character else UNKNOWN_CHARACTER_NAME
