"""Global test fixtures."""

from datetime import UTC, datetime, timedelta
from typing import Callable
from uuid import uuid4

import pytest

from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import MetadataStatus, RecordId, StationKey
from metad.domain.metadata.service.fingerprint import network_fingerprint

# Network block shared by the submitted document and the catalog responses.
# Fingerprints cover this element only, so the surrounding header may differ.
NL_NETWORK = """<Network code="NL" startDate="1993-01-01T00:00:00">
    <Description>Netherlands Seismic and Acoustic Network</Description>
    <Station code="HGN" startDate="2001-06-06T00:00:00">
      <Latitude>50.764</Latitude>
      <Longitude>5.9317</Longitude>
      <Elevation>{elevation}</Elevation>
      <Site><Name>HEIMANSGROEVE, NETHERLANDS</Name></Site>
    </Station>
  </Network>"""


def stationxml(created: str = "2026-10-01T12:00:00", elevation: str = "135") -> bytes:
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<FDSNStationXML xmlns="http://www.fdsn.org/xml/station/1" schemaVersion="1.1">
  <Source>ORFEUS</Source>
  <Created>{created}</Created>
  {NL_NETWORK.format(elevation=elevation)}
</FDSNStationXML>
""".encode()


@pytest.fixture
def make_stationxml() -> Callable[..., bytes]:
    return stationxml


@pytest.fixture
def submitted_document() -> bytes:
    return stationxml()


@pytest.fixture
def submitted_fingerprint(submitted_document: bytes) -> str:
    fingerprint = network_fingerprint(submitted_document, "NL")
    assert fingerprint is not None
    return fingerprint


@pytest.fixture
def make_record(submitted_fingerprint: str) -> Callable[..., MetadataRecord]:
    """Factory for MetadataRecord with NL.HGN defaults."""
    base = datetime(2026, 10, 1, tzinfo=UTC)
    counter = iter(range(10_000))

    def _make(
        status: MetadataStatus = MetadataStatus.PENDING,
        network: str = "NL",
        station: str = "HGN",
        sha256: str | None = None,
        created_at: datetime | None = None,
        record_id: str | None = None,
    ) -> MetadataRecord:
        return MetadataRecord(
            id=RecordId(record_id or uuid4().hex),
            key=StationKey(network=network, station=station),
            status=status,
            filepath=f"/data/staged/{network}.{station}.{uuid4().hex[:8]}",
            sha256=sha256 or submitted_fingerprint,
            created_at=created_at or base + timedelta(minutes=next(counter)),
        )

    return _make
