"""Fingerprint command: the value stored for a submission at intake."""

import sys
from pathlib import Path

from metad.cli.console import get_console
from metad.domain.metadata.service.fingerprint import list_networks, network_fingerprint


def fingerprint(path: Path, *, network: str | None = None) -> None:
    """Print the SHA-256 fingerprint of the network element(s) of a StationXML file.

    Args:
        path: StationXML document.
        network: Only fingerprint this network. Defaults to every network in the file.
    """
    console = get_console()
    if not path.exists():
        console.error(f"File not found: {path}")
        sys.exit(1)

    document = path.read_bytes()
    codes = [network] if network else list_networks(document)
    if not codes:
        console.error(f"No networks found in {path}", hint="Is this a StationXML document?")
        sys.exit(1)

    for code in codes:
        digest = network_fingerprint(document, code)
        if digest is None:
            console.error(f"Network {code} not found in {path}")
            sys.exit(1)
        console.print(f"{code}\t{digest}")
