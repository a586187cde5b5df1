"""CLI tests for one-shot generation."""

import base64
from functools import partial

import pytest

from lumiere.cli import generate as cli
from lumiere.services.video_generation.veo_client import VeoVideoGenerator


@pytest.fixture(autouse=True)
def no_logging_config(monkeypatch):
    """Keep structlog unconfigured so cached loggers never hold captured streams."""
    monkeypatch.setattr(cli, "configure_logging", lambda settings: None)


@pytest.fixture
def patched_generator(monkeypatch, fake_service):
    """Route the CLI's generator through the fake service."""
    monkeypatch.setattr(
        cli,
        "VeoVideoGenerator",
        partial(VeoVideoGenerator, service_factory=fake_service.factory),
    )
    monkeypatch.setenv("POLL_INTERVAL_SECONDS", "0")
    return fake_service


def test_parse_args_collects_images():
    args = cli.parse_args(["a cat walking", "--image", "a.png", "--image", "b.jpg", "-v"])

    assert args.prompt == "a cat walking"
    assert [str(p) for p in args.images] == ["a.png", "b.jpg"]
    assert args.verbose is True
    assert args.output is None


def test_encode_image_file(tmp_path):
    path = tmp_path / "hero.jpg"
    path.write_bytes(b"jpeg-bytes")

    encoded = cli.encode_image_file(path)

    assert encoded.startswith("data:image/jpeg;base64,")
    assert base64.b64decode(encoded.split(",", 1)[1]) == b"jpeg-bytes"


def test_build_character(tmp_path):
    paths = []
    for i in range(4):
        path = tmp_path / f"{i}.png"
        path.write_bytes(bytes([i]))
        paths.append(path)

    assert cli.build_character("Hero", []) is None

    character = cli.build_character("Hero", paths)
    assert character.name == "Hero"
    assert len(character.images) == 3


@pytest.mark.asyncio
async def test_missing_key_exit_code(monkeypatch, capsys):
    monkeypatch.setenv("API_KEY", "")

    assert await cli.async_main(["a cat walking"]) == cli.EXIT_CREDENTIAL
    assert "API_KEY" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_prints_url(monkeypatch, capsys, patched_generator):
    monkeypatch.setenv("API_KEY", "cli-key")

    assert await cli.async_main(["a cat walking"]) == cli.EXIT_OK

    assert capsys.readouterr().out.strip().splitlines()[-1] == (
        "https://example/video1&key=cli-key"
    )
    assert patched_generator.api_keys == ["cli-key"]


@pytest.mark.asyncio
async def test_reference_images_from_files(monkeypatch, tmp_path, patched_generator):
    monkeypatch.setenv("API_KEY", "cli-key")
    image = tmp_path / "hero.png"
    image.write_bytes(b"png")

    assert await cli.async_main(["hero waves", "--image", str(image)]) == cli.EXIT_OK

    config = patched_generator.start_calls[0]["config"]
    assert len(config.reference_images) == 1
    assert config.reference_images[0].image.image_bytes == b"png"


@pytest.mark.asyncio
async def test_credential_error_exit_code(monkeypatch, capsys, patched_generator):
    monkeypatch.setenv("API_KEY", "cli-key")
    patched_generator.scripts["x"] = [RuntimeError("Requested entity was not found.")]

    assert await cli.async_main(["x"]) == cli.EXIT_CREDENTIAL
    assert "API Key Invalid" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_generation_error_exit_code(monkeypatch, capsys, patched_generator):
    monkeypatch.setenv("API_KEY", "cli-key")
    patched_generator.scripts["x"] = [RuntimeError("quota exceeded")]

    assert await cli.async_main(["x"]) == cli.EXIT_GENERATION_FAILED
    assert "quota exceeded" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_unreadable_image(monkeypatch, tmp_path):
    monkeypatch.setenv("API_KEY", "cli-key")

    code = await cli.async_main(["x", "--image", str(tmp_path / "missing.png")])

    assert code == cli.EXIT_GENERATION_FAILED


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   "])
async def test_blank_character_name(monkeypatch, tmp_path, capsys, patched_generator, name):
    monkeypatch.setenv("API_KEY", "cli-key")
    image = tmp_path / "hero.png"
    image.write_bytes(b"png")

    code = await cli.async_main(["x", "--image", str(image), "--name", name])

    assert code == cli.EXIT_GENERATION_FAILED
    assert "Character name must not be blank" in capsys.readouterr().err
    assert patched_generator.start_calls == []
