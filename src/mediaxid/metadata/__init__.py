"""Metadata service helpers: image lookup and external-id aggregation."""

from mediaxid.metadata.base import (
    AuthenticationError,
    MalformedResponseError,
    MetadataServiceClient,
    ServiceFault,
)
from mediaxid.metadata.image import ImageResolver, MetadataImage
from mediaxid.metadata.models import (
    AcrMatch,
    Contributor,
    ExternalId,
    QueryResult,
    SizeClass,
    TvAiring,
    TvChannel,
    TvProgram,
    VideoWork,
)
from mediaxid.metadata.xid import ExternalIdAggregator, deduplicate

__all__ = [
    "AcrMatch",
    "AuthenticationError",
    "Contributor",
    "ExternalId",
    "ExternalIdAggregator",
    "ImageResolver",
    "MalformedResponseError",
    "MetadataImage",
    "MetadataServiceClient",
    "QueryResult",
    "ServiceFault",
    "SizeClass",
    "TvAiring",
    "TvChannel",
    "TvProgram",
    "VideoWork",
    "deduplicate",
]
