"""HTTP adapter for the PublicationVerifier port (FDSNWS station service)."""

import logging

import httpx

from metad.domain.metadata.model.value import StationKey
from metad.domain.metadata.port.verifier import PublicationVerifier

logger = logging.getLogger(__name__)


class FdsnwsStationVerifier(PublicationVerifier):
    """Queries ``<url>?network=..&station=..&level=response`` using httpx.

    Any transport error, timeout or non-200 response is reported as
    unavailable (None).
    """

    def __init__(self, client: httpx.AsyncClient, url: str) -> None:
        self._client = client
        self._url = url

    async def fetch(self, key: StationKey) -> bytes | None:
        params = {"network": key.network, "station": key.station, "level": "response"}
        try:
            response = await self._client.get(self._url, params=params)
        except httpx.HTTPError as e:
            logger.warning(f"FDSNWS request for {key} failed: {e!r}")
            return None

        # 204 means the catalog does not know the station (yet)
        if response.status_code != httpx.codes.OK:
            logger.debug(f"FDSNWS returned {response.status_code} for {key}")
            return None
        return response.content
