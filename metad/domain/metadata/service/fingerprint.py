"""Content fingerprints for StationXML network elements.

The intake path stores the fingerprint of the submitted network element; the
check stage recomputes it from what the catalog serves. Both sides must use
``network_fingerprint`` so the serialization is identical.
"""

import hashlib
from xml.etree import ElementTree


def sha256_hex(buffer: bytes | str) -> str:
    """Return the SHA-256 hex digest of a buffer (str is UTF-8 encoded)."""
    if isinstance(buffer, str):
        buffer = buffer.encode("utf-8")
    return hashlib.sha256(buffer).hexdigest()


def _namespace(tag: str) -> str:
    if tag.startswith("{"):
        return tag[1 : tag.index("}")]
    return ""


def _parse(document: bytes | str) -> tuple[ElementTree.Element, str] | None:
    try:
        root = ElementTree.fromstring(document)
    except ElementTree.ParseError:
        return None
    ns = _namespace(root.tag)
    return root, f"{{{ns}}}Network" if ns else "Network"


def list_networks(document: bytes | str) -> list[str]:
    """Codes of the top-level networks in a StationXML document, in order."""
    parsed = _parse(document)
    if parsed is None:
        return []
    root, tag = parsed
    return [code for element in root.findall(tag) if (code := element.get("code"))]


def extract_network(document: bytes | str, network: str) -> ElementTree.Element | None:
    """Find the top-level ``Network`` element with the given code.

    Returns None when the document is not well-formed XML or does not contain
    the expected network.
    """
    parsed = _parse(document)
    if parsed is None:
        return None

    root, tag = parsed
    for element in root.findall(tag):
        if element.get("code") == network:
            return element
    return None


def canonical_network(element: ElementTree.Element) -> str:
    """Serialize a network element to its canonical (C14N 2.0) string form."""
    # Trailing whitespace after </Network> belongs to the parent document
    element.tail = None
    raw = ElementTree.tostring(element, encoding="unicode")
    return ElementTree.canonicalize(raw)


def network_fingerprint(document: bytes | str, network: str) -> str | None:
    """Fingerprint of the network element of a StationXML document, or None."""
    element = extract_network(document, network)
    if element is None:
        return None
    return sha256_hex(canonical_network(element))
