"""Tests for metadata models: source matching, immutability, and dispatch tags."""

import pytest
from pydantic import TypeAdapter, ValidationError

from mediaxid.metadata.models import (
    AcrMatch,
    ExternalId,
    QueryResult,
    TvChannel,
    TvProgram,
    VideoWork,
    XidTarget,
)


@pytest.mark.parametrize(
    ("preferred", "expected"),
    [("", True), ("tmsid", True), ("TMSID", True), ("imdb", False)],
)
def test_external_id_matches_source(preferred: str, expected: bool) -> None:
    assert ExternalId(source="TmsId", value="1").matches_source(preferred) is expected


def test_objects_are_frozen() -> None:
    channel = TvChannel(gn_id="c")
    with pytest.raises(ValidationError):
        channel.gn_id = "other"  # type: ignore[misc]


def test_query_result_filters_by_kind() -> None:
    result = QueryResult(
        records=(
            TvProgram(gn_id="p1"),
            VideoWork(gn_id="w1"),
            TvProgram(gn_id="p2"),
        )
    )
    assert [p.gn_id for p in result.tv_programs()] == ["p1", "p2"]
    assert [w.gn_id for w in result.video_works()] == ["w1"]
    assert list(result.tv_channels()) == []


def test_xid_target_discriminates_on_kind() -> None:
    adapter = TypeAdapter(XidTarget)
    match = adapter.validate_python(
        {"kind": "acr_match", "work": {"kind": "video_work", "gn_id": "w"}}
    )
    assert isinstance(match, AcrMatch)
    assert match.airing is None
    channel = adapter.validate_python({"kind": "tv_channel", "gn_id": "c"})
    assert isinstance(channel, TvChannel)
    with pytest.raises(ValidationError):
        adapter.validate_python({"kind": "video_work", "gn_id": "w"})
