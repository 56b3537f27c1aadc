"""Client implementations for the metadata service."""

from mediaxid.metadata.clients.http import HttpMetadataServiceClient

__all__ = ["HttpMetadataServiceClient"]
