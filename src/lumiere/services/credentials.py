"""API key selection and the key gate.

The gate decides whether generation is allowed. Its state machine:

    checking --check()--> selected | missing
    missing/selected --select_key()--> selected      (optimistic_select)
    selected --invalidate()--> missing               (credential error from Veo)

``select_key`` does not wait for the credential provider to confirm anything.
If the user backs out of selection the gate still reports "selected" until the
next generation fails with a credential error, which flips it back through
``invalidate``.
"""

from enum import Enum
from typing import Protocol

import structlog

from lumiere.services.exceptions import KeyNotSelectedError

logger = structlog.get_logger(__name__)


class CredentialProvider(Protocol):
    """External collaborator owning the actual API key."""

    async def has_selected_api_key(self) -> bool: ...

    def open_select_key(self, api_key: str | None = None) -> None: ...

    def current_key(self) -> str: ...


class SettingsCredentialProvider:
    """Credential provider seeded from ``Settings.api_key``.

    Selecting a key replaces the in-memory value; nothing is written to disk.
    """

    def __init__(self, api_key: str = ""):
        self._api_key = api_key

    async def has_selected_api_key(self) -> bool:
        return bool(self._api_key)

    def open_select_key(self, api_key: str | None = None) -> None:
        if api_key:
            self._api_key = api_key

    def current_key(self) -> str:
        return self._api_key


class KeyState(str, Enum):
    """Key gate status."""

    CHECKING = "checking"
    MISSING = "missing"
    SELECTED = "selected"


class KeyGate:
    """Session state tracking whether a usable API key is selected."""

    def __init__(self, provider: CredentialProvider):
        self.provider = provider
        self.state = KeyState.CHECKING
        self.key_error: str | None = None

    @property
    def has_key(self) -> bool:
        return self.state == KeyState.SELECTED

    @property
    def is_checking(self) -> bool:
        return self.state == KeyState.CHECKING

    async def check(self) -> bool:
        """Ask the provider once whether a key is selected.

        Provider failures are logged and leave the gate closed.

        Returns:
            True if a key is selected
        """
        try:
            selected = await self.provider.has_selected_api_key()
        except Exception as e:
            logger.error(
                "key_gate.check_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            selected = False

        self.state = KeyState.SELECTED if selected else KeyState.MISSING
        logger.info("key_gate.checked", state=self.state.value)
        return selected

    def select_key(self, api_key: str | None = None) -> None:
        """Open key selection and optimistically assume it succeeded (optimistic_select)."""
        self.provider.open_select_key(api_key)
        self.state = KeyState.SELECTED
        self.key_error = None
        logger.info("key_gate.selected", optimistic=True)

    def invalidate(self, message: str) -> None:
        """Close the gate after the service rejected the key."""
        self.state = KeyState.MISSING
        self.key_error = message
        logger.warning("key_gate.invalidated", key_error=message)

    def require_key(self) -> None:
        """Raise unless a key is selected.

        Raises:
            KeyNotSelectedError: If the gate is checking or missing
        """
        if not self.has_key:
            raise KeyNotSelectedError(
                self.key_error or "No API key selected. Select a key before generating videos."
            )
