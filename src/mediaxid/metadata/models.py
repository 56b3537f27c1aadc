"""Data models for metadata service objects.

This module defines the immutable object handles exchanged with a metadata
service (channels, programs, works, contributors, airings and ACR matches),
the external identifiers attached to full records, and the result of a
find-by-object query.

Design:
- Every object carries a literal ``kind`` tag so unions of objects can be
  discriminated by pydantic and dispatched with a ``match`` statement.
- Objects are frozen; a query seed and the full record returned for it are
  separate instances.
- ``external_ids`` is only populated on full records fetched with link data.
"""

from collections.abc import Iterator
from enum import Enum
from typing import Annotated, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field


class SizeClass(str, Enum):
    """Image size classes understood by the metadata service.

    The order of a caller-supplied sequence of size classes defines priority;
    the enum itself carries no ordering.
    """

    THUMBNAIL = "thumbnail"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    XLARGE = "xlarge"


class ExternalId(BaseModel):
    """A third-party identifier tagged with its issuing source (e.g. "tmsid")."""

    model_config = ConfigDict(frozen=True)

    source: str
    value: str

    def matches_source(self, preferred_source: str) -> bool:
        """Return True if *preferred_source* is empty or names this id's source.

        The comparison is case-insensitive.
        """
        if not preferred_source:
            return True
        return preferred_source.casefold() == self.source.casefold()


class MetadataObject(BaseModel):
    """Base class for all service object handles."""

    model_config = ConfigDict(frozen=True)

    gn_id: str
    """The object's identifier in the metadata service."""
    title: str | None = None
    external_ids: tuple[ExternalId, ...] = ()
    """External ids, present on full records returned with link data."""


class TvChannel(MetadataObject):
    """A TV channel."""

    kind: Literal["tv_channel"] = "tv_channel"
    call_sign: str | None = None


class VideoWork(MetadataObject):
    """A video work (film, series or episode) in the video catalog."""

    kind: Literal["video_work"] = "video_work"


class TvProgram(MetadataObject):
    """A TV program, optionally linked to the video work it presents."""

    kind: Literal["tv_program"] = "tv_program"
    work: VideoWork | None = None


class Contributor(MetadataObject):
    """A person or group credited on a work. Only used for image lookups."""

    kind: Literal["contributor"] = "contributor"


class TvAiring(MetadataObject):
    """A scheduled broadcast instance of a program on a channel."""

    kind: Literal["tv_airing"] = "tv_airing"
    program: TvProgram
    channel: TvChannel | None = None


class AcrMatch(BaseModel):
    """Result of automatic content recognition.

    A match references either an airing (live broadcast context) or a video
    work directly. When both are present the airing wins.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["acr_match"] = "acr_match"
    airing: TvAiring | None = None
    work: VideoWork | None = None


ImageTarget = Union[TvChannel, TvProgram, VideoWork, Contributor]
"""Objects that images can be requested for."""

XidTarget = Annotated[
    Union[TvChannel, TvProgram, AcrMatch], Field(discriminator="kind")
]
"""Objects that external ids can be aggregated for."""

Record = Annotated[
    Union[TvChannel, TvProgram, VideoWork, Contributor, TvAiring],
    Field(discriminator="kind"),
]

R = TypeVar("R", bound=MetadataObject)


class QueryResult(BaseModel):
    """Full records returned by a find-by-object query, in service order."""

    model_config = ConfigDict(frozen=True)

    records: tuple[Record, ...] = ()

    def _of_kind(self, cls: type[R]) -> Iterator[R]:
        for record in self.records:
            if isinstance(record, cls):
                yield record

    def tv_channels(self) -> Iterator[TvChannel]:
        return self._of_kind(TvChannel)

    def tv_programs(self) -> Iterator[TvProgram]:
        return self._of_kind(TvProgram)

    def video_works(self) -> Iterator[VideoWork]:
        return self._of_kind(VideoWork)
