import pytest
from typer.testing import CliRunner

from figma_assets.api.client import FigmaAPIClient
from figma_assets.cli import app as app_module
from figma_assets.exceptions import EncodeError, ListingError, TransportError
from figma_assets.media import encoder as encoder_module
from figma_assets.media.downloader import Downloader
from figma_assets.media.encoder import ImageEncoder
from figma_assets.models.assets import AssetRecord

runner = CliRunner()


@pytest.fixture(autouse=True)
def _config_file(tmp_path, monkeypatch):
    monkeypatch.setattr(app_module, "CONFIG_FILE", tmp_path / "cfg" / "config.ini")


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("FIGMA_TOKEN", "figd_test")
    monkeypatch.setenv("FIGMA_FILE_KEY", "FILEKEY")


@pytest.fixture
def fake_encode(monkeypatch):
    async def encode(self, target_format, input_path, output_path):
        if input_path.name == "broken.png":
            raise EncodeError("'avifenc' exited with code 1 for 'broken.png'")
        output_path.write_bytes(b"out")

    monkeypatch.setattr(ImageEncoder, "encode", encode)


def _listing(monkeypatch, result=None, error=None):
    async def fetch_assets(self, node_ids=None):
        if error:
            raise error
        return result

    monkeypatch.setattr(FigmaAPIClient, "fetch_assets", fetch_assets)


def _downloads(monkeypatch, fail_urls=()):
    async def download_file(self, url, destination_path):
        if url in fail_urls:
            raise TransportError(f"HTTP 500 while fetching '{url}'")
        with open(destination_path, "wb") as f:
            f.write(b"png")
        return 3

    monkeypatch.setattr(Downloader, "download_file", download_file)


def test_version():
    result = runner.invoke(app_module.app, ["--version"])

    assert result.exit_code == 0
    assert "figma-assets" in result.output


def test_init_writes_config(tmp_path):
    result = runner.invoke(app_module.app, ["init", "figd_token", "KEY"])

    assert result.exit_code == 0
    assert "figd_token" in app_module.CONFIG_FILE.read_text(encoding="utf-8")


def test_convert_unsupported_format_exits_before_io(tmp_path, fake_encode):
    out = tmp_path / "out"
    result = runner.invoke(
        app_module.app,
        ["convert", "-i", str(tmp_path), "-o", str(out), "--format", "bmp"],
    )

    assert result.exit_code == 1
    assert "UnsupportedFormatError" in result.output
    assert not out.exists()


def test_convert_webp_without_encoder_shows_guide(tmp_path, monkeypatch):
    monkeypatch.setattr(encoder_module.shutil, "which", lambda name: None)
    (tmp_path / "a.png").write_bytes(b"x")
    out = tmp_path / "out"

    result = runner.invoke(
        app_module.app,
        ["convert", "-i", str(tmp_path), "-o", str(out), "--format", "webp"],
    )

    assert result.exit_code == 1
    assert "cwebp" in result.output
    assert not out.exists()


def test_convert_avif_scenario(tmp_path, fake_encode):
    src = tmp_path / "src"
    src.mkdir()
    for name in ("icon.png", "logo.png"):
        (src / name).write_bytes(b"x")
    (src / "readme.txt").write_text("skip")
    out = tmp_path / "out"

    result = runner.invoke(
        app_module.app,
        ["convert", "-i", str(src), "-o", str(out), "--format", "avif"],
    )

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in out.iterdir()) == ["icon.avif", "logo.avif"]


def test_convert_partial_failure_exits_with_two(tmp_path, fake_encode):
    src = tmp_path / "src"
    src.mkdir()
    for name in ("ok.png", "broken.png"):
        (src / name).write_bytes(b"x")

    result = runner.invoke(
        app_module.app,
        ["convert", "-i", str(src), "-o", str(tmp_path / "out"), "--format", "avif"],
    )

    assert result.exit_code == 2
    assert "broken.png" in result.output


def test_download_success(tmp_path, monkeypatch, credentials):
    _listing(monkeypatch, [AssetRecord("1", "A/B", "http://x/1.png")])
    _downloads(monkeypatch)

    result = runner.invoke(
        app_module.app, ["download", "--download-dir", str(tmp_path / "dl")]
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "dl" / "A_B.png").read_bytes() == b"png"


def test_download_nothing_to_do(tmp_path, monkeypatch, credentials):
    _listing(monkeypatch, None)

    result = runner.invoke(
        app_module.app, ["download", "--download-dir", str(tmp_path / "dl")]
    )

    assert result.exit_code == 0
    assert "No images found" in result.output


def test_download_listing_failure(tmp_path, monkeypatch, credentials):
    _listing(monkeypatch, error=ListingError("Could not reach the Figma API"))
    _downloads(monkeypatch, fail_urls={"never"})

    result = runner.invoke(
        app_module.app, ["download", "--download-dir", str(tmp_path / "dl")]
    )

    assert result.exit_code == 1
    assert "ListingError" in result.output


def test_download_partial_failure(tmp_path, monkeypatch, credentials):
    _listing(
        monkeypatch,
        [AssetRecord("1", "good", "http://x/1"), AssetRecord("2", "bad", "http://x/2")],
    )
    _downloads(monkeypatch, fail_urls={"http://x/2"})

    result = runner.invoke(
        app_module.app, ["download", "--download-dir", str(tmp_path / "dl")]
    )

    assert result.exit_code == 2
    assert (tmp_path / "dl" / "good.png").exists()


def test_download_without_credentials_is_a_configuration_error(tmp_path):
    result = runner.invoke(
        app_module.app, ["download", "--download-dir", str(tmp_path / "dl")]
    )

    assert result.exit_code == 1
    assert "ConfigurationError" in result.output
