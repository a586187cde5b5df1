"""pytest fixtures for Lumiere Studio tests.

Provides:
- fake_service: Scripted stand-in for the Veo service (no network)
- credentials: In-memory credential provider holding a test key
- key_gate: Key gate already in the selected state
- generator: VeoVideoGenerator wired to fake_service with a zero poll interval
- studio: Studio composed from the above
- make_operation / data_uri: Builders for operation handles and encoded images
"""

import base64
from types import SimpleNamespace

import pytest

from lumiere.services.credentials import KeyGate, KeyState, SettingsCredentialProvider
from lumiere.services.video_generation.veo_client import VeoVideoGenerator
from lumiere.studio import Studio

TEST_API_KEY = "test-key"


def build_operation(done=False, uri=None, error=None, videos=None):
    """Operation handle shaped like google-genai's GenerateVideosOperation."""
    if videos is None:
        videos = [SimpleNamespace(video=SimpleNamespace(uri=uri))] if uri else []
    response = SimpleNamespace(generated_videos=videos) if done else None
    return SimpleNamespace(done=done, response=response, error=error)


def build_data_uri(payload: bytes = b"fake-image", mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


class FakeVideoService:
    """Scripted VideoService.

    Each prompt has a script: the first entry is returned by the start call,
    the following ones by successive refreshes. Exceptions in a script are
    raised instead of returned. Prompts without their own script poll once
    and then complete with ``default_uri``.
    """

    def __init__(self):
        self.default_uri = "https://example/video1"
        self.scripts: dict[str, list] = {}
        self.start_calls: list[dict] = []
        self.refresh_calls = 0
        self.api_keys: list[str] = []

    def factory(self, api_key: str) -> "FakeVideoService":
        self.api_keys.append(api_key)
        return self

    async def start_generation(self, model, prompt, config):
        self.start_calls.append({"model": model, "prompt": prompt, "config": config})
        if prompt not in self.scripts:
            self.scripts[prompt] = [
                build_operation(done=False),
                build_operation(done=True, uri=self.default_uri),
            ]
        return self._next(prompt)

    async def refresh_operation(self, operation):
        self.refresh_calls += 1
        return self._next(operation.prompt)

    def _next(self, prompt):
        item = self.scripts[prompt].pop(0)
        if isinstance(item, Exception):
            raise item
        item.prompt = prompt
        return item


@pytest.fixture
def make_operation():
    return build_operation


@pytest.fixture
def data_uri():
    return build_data_uri


@pytest.fixture
def fake_service() -> FakeVideoService:
    return FakeVideoService()


@pytest.fixture
def credentials() -> SettingsCredentialProvider:
    return SettingsCredentialProvider(TEST_API_KEY)


@pytest.fixture
def key_gate(credentials) -> KeyGate:
    gate = KeyGate(credentials)
    gate.state = KeyState.SELECTED
    return gate


@pytest.fixture
def generator(credentials, fake_service) -> VeoVideoGenerator:
    return VeoVideoGenerator(
        credentials=credentials,
        model="veo-test",
        poll_interval_seconds=0,
        service_factory=fake_service.factory,
    )


@pytest.fixture
def studio(key_gate, generator) -> Studio:
    return Studio(key_gate=key_gate, generator=generator)
