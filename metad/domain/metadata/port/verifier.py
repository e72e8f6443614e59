"""PublicationVerifier port - read access to the remote station catalog."""

from abc import abstractmethod
from typing import Protocol

from metad.domain.metadata.model.value import StationKey
from metad.domain.shared.port import Port


class PublicationVerifier(Port, Protocol):
    @abstractmethod
    async def fetch(self, key: StationKey) -> bytes | None:
        """Fetch the response-level station document.

        Returns None when the catalog is unavailable; transport errors are never raised.
        """
        ...
