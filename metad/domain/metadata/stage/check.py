"""Publication check against the FDSNWS station catalog."""

import logging
import time
from dataclasses import dataclass
from typing import AbstractSet, Callable

from metad.config import CatalogConfig
from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import (
    UNCHANGED,
    MetadataStatus,
    RecordId,
    StageResult,
)
from metad.domain.metadata.port.verifier import PublicationVerifier
from metad.domain.metadata.service.fingerprint import network_fingerprint
from metad.domain.metadata.stage.base import Stage

logger = logging.getLogger(__name__)


@dataclass
class _Attempts:
    count: int = 0
    next_due: float = 0.0


class CheckStage(Stage):
    """Completes a merged record once the catalog serves matching content.

    The network element returned by the catalog is fingerprinted and compared
    with the fingerprint stored at submission. Anything short of a match
    (catalog down, malformed response, different content) leaves the record
    MERGED so it is checked again on a later cycle. There is no retry ceiling.

    With ``backoff_base`` set, a record that failed to verify is not re-checked
    until ``min(backoff_base * 2 ** (n - 1), backoff_max)`` seconds after its
    n-th failed attempt. Records that are not yet due stay UNCHANGED without
    contacting the catalog.
    """

    __stage_name__ = "check"

    def __init__(
        self,
        verifier: PublicationVerifier,
        config: CatalogConfig,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._verifier = verifier
        self._config = config
        self._clock = clock
        self._attempts: dict[RecordId, _Attempts] = {}

    async def run(self, record: MetadataRecord) -> StageResult:
        if not self._is_due(record.id):
            logger.debug(f"check for {record.key} deferred by backoff")
            return UNCHANGED

        logger.info(f"check is requested for {record.key}")
        document = await self._verifier.fetch(record.key)

        if document is None:
            logger.info(f"Catalog unavailable for {record.key}")
            return self._not_yet(record)

        fingerprint = network_fingerprint(document, record.network)
        if fingerprint is None:
            logger.warning(f"Catalog returned no usable {record.network} network for {record.key}")
            return self._not_yet(record)

        if fingerprint != record.sha256.lower():
            logger.debug(f"Catalog content for {record.key} does not match submission yet")
            return self._not_yet(record)

        self._attempts.pop(record.id, None)
        return MetadataStatus.COMPLETED

    def retain(self, active: AbstractSet[RecordId]) -> None:
        for record_id in self._attempts.keys() - active:
            del self._attempts[record_id]

    def _is_due(self, record_id: RecordId) -> bool:
        attempts = self._attempts.get(record_id)
        return attempts is None or self._clock() >= attempts.next_due

    def _not_yet(self, record: MetadataRecord) -> StageResult:
        if self._config.backoff_base > 0:
            attempts = self._attempts.setdefault(record.id, _Attempts())
            attempts.count += 1
            delay = min(
                self._config.backoff_base * 2 ** (attempts.count - 1),
                self._config.backoff_max,
            )
            attempts.next_due = self._clock() + delay
        return UNCHANGED
