"""Image lookup for metadata objects.

Fetches the first available image for an object from an ordered list of
preferred size classes. Every call performs blocking network I/O: call
:meth:`ImageResolver.resolve` from a worker thread, or await
:meth:`ImageResolver.resolve_async` from async code.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from mediaxid.metadata.base import MetadataServiceClient
from mediaxid.metadata.models import ImageTarget, SizeClass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetadataImage:
    """An image payload together with the object and size it was fetched for."""

    obj: ImageTarget
    size: SizeClass
    data: bytes


class ImageResolver:
    """Resolve images through a :class:`MetadataServiceClient`.

    Service faults are not caught: an absent image (``None``) always means the
    service had no image in any of the requested sizes.
    """

    def __init__(self, client: MetadataServiceClient) -> None:
        self._client = client

    def resolve(
        self, obj: ImageTarget, preferred_sizes: Sequence[SizeClass]
    ) -> bytes | None:
        """Return the first image of *obj* found in *preferred_sizes* order.

        Args:
            obj: The object to fetch an image for.
            preferred_sizes: Size classes in priority order.

        Returns:
            The image bytes, or None if the object has no image in any of the
            requested sizes.

        Raises:
            ServiceFault: If any service call fails.
        """
        image = self.resolve_image(obj, preferred_sizes)
        return image.data if image is not None else None

    def resolve_image(
        self, obj: ImageTarget, preferred_sizes: Sequence[SizeClass]
    ) -> MetadataImage | None:
        """Like :meth:`resolve`, but also report which size class matched."""
        if self._client.image_count(obj) <= 0:
            logger.debug("No images available for %s %s", obj.kind, obj.gn_id)
            return None
        for size in preferred_sizes:
            data = self._client.get_image(obj, size)
            if data is not None:
                logger.debug(
                    "Resolved %s image for %s %s", size.value, obj.kind, obj.gn_id
                )
                return MetadataImage(obj=obj, size=size, data=data)
        return None

    async def resolve_async(
        self, obj: ImageTarget, preferred_sizes: Sequence[SizeClass]
    ) -> bytes | None:
        """Run :meth:`resolve` in a worker thread."""
        return await asyncio.to_thread(self.resolve, obj, preferred_sizes)
