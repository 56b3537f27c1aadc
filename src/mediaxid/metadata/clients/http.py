"""HTTP binding of the metadata service client.

Implements :class:`MetadataServiceClient` against the JSON metadata gateway.
One instance holds one ``httpx.Client`` and one registered session user and
is meant to be created once per application session and reused.
"""

import logging
from http import HTTPStatus
from typing import Any

import httpx
from pydantic import ValidationError

from mediaxid.metadata.base import (
    AuthenticationError,
    MalformedResponseError,
    MetadataServiceClient,
    ServiceFault,
)
from mediaxid.metadata.models import (
    ImageTarget,
    MetadataObject,
    QueryResult,
    SizeClass,
    TvChannel,
    TvProgram,
    VideoWork,
)
from mediaxid.metadata.settings import Settings

logger = logging.getLogger(__name__)


class HttpMetadataServiceClient(MetadataServiceClient):
    """Blocking client for the metadata gateway.

    Credentials and the endpoint come from :class:`Settings`. The session user
    is registered lazily on the first call and its token is reused afterwards.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Connection settings; loaded from the environment if None.
            http_client: Preconfigured ``httpx.Client``. When None one is built
                from ``settings.SERVICE_URL`` and ``settings.TIMEOUT_S``.
        """
        self.settings = settings or Settings()
        self._http = http_client or httpx.Client(
            base_url=self.settings.SERVICE_URL, timeout=self.settings.TIMEOUT_S
        )
        self._user_token: str | None = None

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    def find_channels(self, channel: TvChannel, link_data: bool = False) -> QueryResult:
        return self._find("/epg/channels/find", channel, link_data)

    def find_programs(self, program: TvProgram, link_data: bool = False) -> QueryResult:
        return self._find("/epg/programs/find", program, link_data)

    def find_works(self, work: VideoWork, link_data: bool = False) -> QueryResult:
        return self._find("/video/works/find", work, link_data)

    def image_count(self, obj: ImageTarget) -> int:
        resp = self._request("GET", f"/link/{obj.kind}/{obj.gn_id}/images")
        self._raise_for_status(resp)
        data = self._json(resp)
        try:
            return int(data["count"])
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedResponseError(
                f"Invalid image count for {obj.kind} {obj.gn_id}: {data!r}"
            ) from exc

    def get_image(self, obj: ImageTarget, size: SizeClass) -> bytes | None:
        resp = self._request(
            "GET",
            f"/link/{obj.kind}/{obj.gn_id}/image",
            params={"size": size.value},
        )
        if resp.status_code == HTTPStatus.NOT_FOUND:
            return None
        self._raise_for_status(resp)
        return resp.content or None

    def _find(self, path: str, obj: MetadataObject, link_data: bool) -> QueryResult:
        resp = self._request(
            "POST", path, json={"gn_id": obj.gn_id, "link_data": link_data}
        )
        self._raise_for_status(resp)
        data = self._json(resp)
        try:
            result = QueryResult.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponseError(f"Invalid query result from {path}") from exc
        logger.debug("%s %s -> %d record(s)", path, obj.gn_id, len(result.records))
        return result

    def _user(self) -> str:
        if self._user_token is None:
            self.settings.require_keys()
            resp = self._send(
                "POST",
                "/users/register",
                json={
                    "client_id": self.settings.CLIENT_ID,
                    "client_tag": self.settings.CLIENT_TAG or "",
                },
            )
            self._raise_for_status(resp)
            data = self._json(resp)
            token = data.get("user") if isinstance(data, dict) else None
            if not token:
                raise MalformedResponseError("User registration returned no token")
            self._user_token = str(token)
        return self._user_token

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._user()}"}
        return self._send(method, path, headers=headers, **kwargs)

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ServiceFault(f"{method} {path} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(resp: httpx.Response) -> None:
        if resp.status_code in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            raise AuthenticationError(
                f"Service rejected credentials ({resp.status_code})"
            )
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ServiceFault(
                f"Service returned {resp.status_code} for {resp.request.url}"
            ) from exc

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponseError(
                f"Response from {resp.request.url} is not JSON"
            ) from exc
