"""Base abstraction for metadata service clients.

Defines the interface the image and external-id helpers depend on. Concrete
bindings (authentication, transport, serialization) implement it; see
``mediaxid.metadata.clients.http`` for the HTTP binding.

All methods are blocking. A client handle is created once per application
session and reused across calls.
"""

from abc import ABC, abstractmethod

from mediaxid.metadata.models import (
    ImageTarget,
    QueryResult,
    SizeClass,
    TvChannel,
    TvProgram,
    VideoWork,
)


class ServiceFault(Exception):
    """Raised when a metadata service query or fetch fails."""


class AuthenticationError(ServiceFault):
    """Raised when the service rejects the session credentials."""


class MalformedResponseError(ServiceFault):
    """Raised when the service returns a body that cannot be parsed."""


class MetadataServiceClient(ABC):
    """Abstract base class for metadata service clients.

    Implementations must raise :class:`ServiceFault` (or a subclass) for any
    failed call. An empty result is not a fault. Clients are context managers;
    override :meth:`close` to release connections.
    """

    def __enter__(self) -> "MetadataServiceClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release resources held by the client."""

    @abstractmethod
    def find_channels(self, channel: TvChannel, link_data: bool = False) -> QueryResult:
        """Return full channel records matching *channel*.

        Args:
            channel: The channel handle to look up.
            link_data: Include external ids in the returned records. The
                service omits them when this is False.

        Raises:
            ServiceFault: If the query fails.
        """
        raise NotImplementedError

    @abstractmethod
    def find_programs(self, program: TvProgram, link_data: bool = False) -> QueryResult:
        """Return full program records matching *program*."""
        raise NotImplementedError

    @abstractmethod
    def find_works(self, work: VideoWork, link_data: bool = False) -> QueryResult:
        """Return full video work records matching *work*."""
        raise NotImplementedError

    @abstractmethod
    def image_count(self, obj: ImageTarget) -> int:
        """Return the number of images the service holds for *obj*."""
        raise NotImplementedError

    @abstractmethod
    def get_image(self, obj: ImageTarget, size: SizeClass) -> bytes | None:
        """Return the image payload of *obj* in *size*, or None if unavailable."""
        raise NotImplementedError
