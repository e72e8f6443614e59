"""DI provider for HTTP infrastructure."""

from typing import AsyncIterable, NewType

import httpx
from dishka import provide

from metad.config import Config
from metad.domain.metadata.port.verifier import PublicationVerifier
from metad.infrastructure.http.catalog import FdsnwsStationVerifier
from metad.util.di.base import Provider
from metad.util.di.scope import Scope

CatalogHttpClient = NewType("CatalogHttpClient", httpx.AsyncClient)


class HttpProvider(Provider):
    """DI provider for the catalog HTTP client and verifier."""

    @provide(scope=Scope.APP)
    async def get_catalog_http_client(self, config: Config) -> AsyncIterable[CatalogHttpClient]:
        client = CatalogHttpClient(httpx.AsyncClient(timeout=config.catalog.timeout))
        yield client
        await client.aclose()

    @provide(scope=Scope.APP)
    def get_verifier(self, client: CatalogHttpClient, config: Config) -> PublicationVerifier:
        return FdsnwsStationVerifier(client=client, url=config.catalog.url)
