"""External-id aggregation for channels, programs and ACR matches.

Queries the EPG and video catalogs (with link data enabled, otherwise the
service omits external ids) and flattens the external ids of every returned
full record into a single list, optionally filtered by source.

The fetch methods perform blocking network I/O and should be called from a
worker thread; async callers can use :meth:`ExternalIdAggregator.fetch_async`.

Failure handling is per call, not per record. For channels and programs the
initial find query raises :class:`ServiceFault` to the caller; a fault while
flattening the returned records is logged and the ids gathered so far are
returned. For ACR matches every query is covered the same way, so a failing
nested work lookup ends the branch without losing earlier ids.
"""

import asyncio
import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from mediaxid.metadata.base import MetadataServiceClient, ServiceFault
from mediaxid.metadata.models import (
    AcrMatch,
    ExternalId,
    MetadataObject,
    TvChannel,
    TvProgram,
    VideoWork,
    XidTarget,
)

logger = logging.getLogger(__name__)


def deduplicate(ids: Iterable[ExternalId]) -> list[ExternalId]:
    """Drop repeated ``(source, value)`` pairs, keeping first occurrences.

    :meth:`ExternalIdAggregator.fetch` never does this on its own; the same id
    reached through several records is reported once per record.
    """
    seen: set[tuple[str, str]] = set()
    unique: list[ExternalId] = []
    for xid in ids:
        key = (xid.source.casefold(), xid.value)
        if key not in seen:
            seen.add(key)
            unique.append(xid)
    return unique


class ExternalIdAggregator:
    """Collect external ids through a :class:`MetadataServiceClient`."""

    def __init__(self, client: MetadataServiceClient) -> None:
        self._client = client

    def fetch(self, target: XidTarget, preferred_source: str = "") -> list[ExternalId]:
        """Return the external ids reachable from *target*.

        Args:
            target: A channel, a program, or an ACR match.
            preferred_source: Only keep ids from this source (case-insensitive).
                Empty keeps every id.

        Returns:
            Ids in service order: record order, then order within a record.
            Duplicates are preserved.

        Raises:
            ServiceFault: If the channel or program find query fails.
            TypeError: If *target* is not a supported object kind.
        """
        ids: list[ExternalId] = []
        match target:
            case TvChannel():
                result = self._client.find_channels(target, link_data=True)
                with self._guard(target, ids):
                    self._extend(ids, result.tv_channels(), preferred_source)
            case TvProgram():
                result = self._client.find_programs(target, link_data=True)
                with self._guard(target, ids):
                    self._extend(ids, result.tv_programs(), preferred_source)
            case AcrMatch():
                with self._guard(target, ids):
                    self._collect_match(ids, target, preferred_source)
            case _:
                raise TypeError(
                    f"Cannot fetch external ids for {type(target).__name__}"
                )
        return ids

    def fetch_channel_ids(
        self, channel: TvChannel, preferred_source: str = ""
    ) -> list[ExternalId]:
        """Fetch the ids of a TV channel."""
        return self.fetch(channel, preferred_source)

    def fetch_program_ids(
        self, program: TvProgram, preferred_source: str = ""
    ) -> list[ExternalId]:
        """Fetch the ids of a TV program."""
        return self.fetch(program, preferred_source)

    def fetch_work_ids(
        self, match: AcrMatch, preferred_source: str = ""
    ) -> list[ExternalId]:
        """Fetch the ids of the video work behind an ACR match."""
        return self.fetch(match, preferred_source)

    async def fetch_async(
        self, target: XidTarget, preferred_source: str = ""
    ) -> list[ExternalId]:
        """Run :meth:`fetch` in a worker thread."""
        return await asyncio.to_thread(self.fetch, target, preferred_source)

    def _collect_match(
        self, ids: list[ExternalId], match: AcrMatch, preferred_source: str
    ) -> None:
        if match.airing is not None:
            # With an airing the work is only reachable through its program.
            programs = self._client.find_programs(match.airing.program, link_data=True)
            for program in programs.tv_programs():
                if program.work is not None:
                    self._collect_work(ids, program.work, preferred_source)
        elif match.work is not None:
            self._collect_work(ids, match.work, preferred_source)

    def _collect_work(
        self, ids: list[ExternalId], work: VideoWork, preferred_source: str
    ) -> None:
        result = self._client.find_works(work, link_data=True)
        self._extend(ids, result.video_works(), preferred_source)

    @staticmethod
    def _extend(
        ids: list[ExternalId],
        records: Iterable[MetadataObject],
        preferred_source: str,
    ) -> None:
        for record in records:
            for xid in record.external_ids:
                if xid.matches_source(preferred_source):
                    ids.append(xid)

    @staticmethod
    @contextmanager
    def _guard(target: XidTarget, ids: list[ExternalId]) -> Iterator[None]:
        """Log a ServiceFault raised in the block and keep the ids gathered so far."""
        try:
            yield
        except ServiceFault as exc:
            logger.warning(
                "External id lookup for %s stopped after %d id(s): %s",
                target.kind,
                len(ids),
                exc,
                exc_info=True,
            )
