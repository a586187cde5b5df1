"""Key gate state machine tests.

Covers the startup check, the optimistic select rule and the correction path.
"""

import pytest

from lumiere.services.credentials import KeyGate, KeyState, SettingsCredentialProvider
from lumiere.services.exceptions import KeyNotSelectedError


class FailingProvider(SettingsCredentialProvider):
    async def has_selected_api_key(self) -> bool:
        raise RuntimeError("selector unavailable")


def test_gate_starts_checking():
    gate = KeyGate(SettingsCredentialProvider(""))

    assert gate.state == KeyState.CHECKING
    assert gate.is_checking
    assert not gate.has_key


@pytest.mark.asyncio
async def test_check_with_key():
    gate = KeyGate(SettingsCredentialProvider("k"))

    assert await gate.check() is True
    assert gate.state == KeyState.SELECTED


@pytest.mark.asyncio
async def test_check_without_key():
    gate = KeyGate(SettingsCredentialProvider(""))

    assert await gate.check() is False
    assert gate.state == KeyState.MISSING


@pytest.mark.asyncio
async def test_check_provider_error_closes_gate():
    gate = KeyGate(FailingProvider("k"))

    assert await gate.check() is False
    assert gate.state == KeyState.MISSING
    assert not gate.is_checking


@pytest.mark.asyncio
async def test_select_key_is_optimistic():
    """Selecting opens the gate even when no key was actually supplied."""
    provider = SettingsCredentialProvider("")
    gate = KeyGate(provider)
    await gate.check()

    gate.select_key()

    assert gate.has_key
    assert provider.current_key() == ""


def test_select_key_stores_key_and_clears_error():
    provider = SettingsCredentialProvider("old")
    gate = KeyGate(provider)
    gate.invalidate("bad key")

    gate.select_key("new")

    assert gate.has_key
    assert gate.key_error is None
    assert provider.current_key() == "new"


def test_invalidate_closes_gate():
    gate = KeyGate(SettingsCredentialProvider("k"))
    gate.select_key()

    gate.invalidate("API Key Invalid")

    assert gate.state == KeyState.MISSING
    assert gate.key_error == "API Key Invalid"


def test_require_key():
    gate = KeyGate(SettingsCredentialProvider("k"))

    with pytest.raises(KeyNotSelectedError):
        gate.require_key()

    gate.select_key()
    gate.require_key()

    gate.invalidate("API Key Invalid")
    with pytest.raises(KeyNotSelectedError, match="API Key Invalid"):
        gate.require_key()
