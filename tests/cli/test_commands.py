"""Tests for the mediaxid CLI commands.

The service client is replaced with an in-memory fake so the commands can be
exercised without network access.
"""

import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mediaxid.cli import commands
from mediaxid.cli.commands import ExitCode, app
from mediaxid.metadata.models import (
    ExternalId,
    QueryResult,
    SizeClass,
    TvChannel,
    TvProgram,
    VideoWork,
)
from mediaxid.metadata.settings import MissingCredentialError
from tests.helpers.fake_metadata_client import FakeMetadataClient

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point config lookups at an empty file and clear env overrides."""
    monkeypatch.setattr("mediaxid.utils.config.CONFIG_FILE", tmp_path / "none.toml")
    monkeypatch.delenv("MEDIAXID_XID_PREFERRED_SOURCE", raising=False)
    monkeypatch.delenv("MEDIAXID_IMAGE_SIZES", raising=False)


@pytest.fixture
def fake_client(monkeypatch: pytest.MonkeyPatch) -> FakeMetadataClient:
    client = FakeMetadataClient(
        results={
            ("find_channels", "ch-1"): QueryResult(
                records=(
                    TvChannel(
                        gn_id="ch-1",
                        external_ids=(
                            ExternalId(source="tmsid", value="10001"),
                            ExternalId(source="imdb", value="ch-imdb"),
                            ExternalId(source="tmsid", value="10001"),
                        ),
                    ),
                )
            ),
            ("find_programs", "prog-1"): QueryResult(
                records=(TvProgram(gn_id="prog-1", work=VideoWork(gn_id="w-1")),)
            ),
            ("find_works", "w-1"): QueryResult(
                records=(
                    VideoWork(
                        gn_id="w-1",
                        external_ids=(ExternalId(source="tmsid", value="MV0001"),),
                    ),
                )
            ),
        },
        image_counts={"w-1": 1},
        images={("w-1", SizeClass.MEDIUM): b"IMG"},
    )
    monkeypatch.setattr(commands, "_build_client", lambda: client)
    return client


def test_xids_channel_filters_by_source(fake_client: FakeMetadataClient) -> None:
    result = runner.invoke(app, ["xids", "channel", "ch-1", "--source", "TMSID"])
    assert result.exit_code == ExitCode.SUCCESS
    assert "10001" in result.stdout
    assert "ch-imdb" not in result.stdout


def test_xids_channel_unique(fake_client: FakeMetadataClient) -> None:
    result = runner.invoke(app, ["xids", "channel", "ch-1", "--unique"])
    assert result.exit_code == ExitCode.SUCCESS
    assert result.stdout.count("10001") == 1


def test_xids_source_from_env(
    fake_client: FakeMetadataClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("MEDIAXID_XID_PREFERRED_SOURCE", "imdb")
    result = runner.invoke(app, ["xids", "channel", "ch-1"])
    assert "ch-imdb" in result.stdout
    assert "10001" not in result.stdout


def test_xids_match_with_airing(fake_client: FakeMetadataClient) -> None:
    result = runner.invoke(
        app, ["xids", "match", "--airing-program", "prog-1", "--work", "other"]
    )
    assert result.exit_code == ExitCode.SUCCESS
    assert "MV0001" in result.stdout
    assert ("find_works", "other", True) not in fake_client.calls


def test_xids_not_found(fake_client: FakeMetadataClient) -> None:
    result = runner.invoke(app, ["xids", "match"])
    assert result.exit_code == ExitCode.NOT_FOUND
    assert "No external ids found" in result.stdout
    assert fake_client.calls == []


def test_image_writes_file(fake_client: FakeMetadataClient, tmp_path: Path) -> None:
    out = tmp_path / "work.jpg"
    result = runner.invoke(
        app, ["image", "work", "w-1", "-s", "large", "-s", "medium", "-o", str(out)]
    )
    assert result.exit_code == ExitCode.SUCCESS
    assert out.read_bytes() == b"IMG"
    assert "medium" in result.stdout


def test_image_not_found(fake_client: FakeMetadataClient) -> None:
    result = runner.invoke(app, ["image", "channel", "ch-1"])
    assert result.exit_code == ExitCode.NOT_FOUND
    assert fake_client.calls == [("image_count", "ch-1")]


def test_image_service_fault(fake_client: FakeMetadataClient) -> None:
    fake_client.faults.add(("image_count", "w-1"))
    result = runner.invoke(app, ["image", "work", "w-1"])
    assert result.exit_code == ExitCode.ERROR
    assert "image_count failed" in result.stdout


def test_xids_service_fault(
    fake_client: FakeMetadataClient, caplog: pytest.LogCaptureFixture
) -> None:
    """Failure: a failing channel query exits with ERROR instead of a traceback."""
    fake_client.faults.add(("find_channels", "ch-1"))
    with caplog.at_level(logging.ERROR, logger="mediaxid"):
        result = runner.invoke(app, ["xids", "channel", "ch-1"])
    assert result.exit_code == ExitCode.ERROR
    assert "find_channels failed for ch-1" in result.stdout
    assert "ServiceFault" in caplog.text
    assert fake_client.closed


def test_xids_program_service_fault(fake_client: FakeMetadataClient) -> None:
    fake_client.faults.add(("find_programs", "prog-9"))
    result = runner.invoke(app, ["xids", "program", "prog-9"])
    assert result.exit_code == ExitCode.ERROR
    assert "find_programs failed" in result.stdout


def test_commands_close_the_client(fake_client: FakeMetadataClient) -> None:
    result = runner.invoke(app, ["xids", "channel", "ch-1"])
    assert result.exit_code == ExitCode.SUCCESS
    assert fake_client.closed

    fake_client.closed = False
    runner.invoke(app, ["image", "work", "w-1"])
    assert fake_client.closed


def test_image_invalid_size(fake_client: FakeMetadataClient) -> None:
    result = runner.invoke(app, ["image", "work", "w-1", "--size", "huge"])
    assert result.exit_code != ExitCode.SUCCESS
    assert fake_client.calls == []


def test_missing_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    def _raise() -> FakeMetadataClient:
        raise MissingCredentialError("CLIENT_ID")

    monkeypatch.setattr(commands, "_build_client", _raise)
    result = runner.invoke(app, ["image", "work", "w-1"])
    assert result.exit_code == ExitCode.ERROR
    assert "MEDIAXID_CLIENT_ID" in result.stdout


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == ExitCode.SUCCESS
    assert "mediaxid version" in result.stdout
