from metad.domain.metadata.port.repository import MetadataRepository
from metad.domain.metadata.port.tool_runner import ToolResult, ToolRunner
from metad.domain.metadata.port.verifier import PublicationVerifier

__all__ = [
    "MetadataRepository",
    "PublicationVerifier",
    "ToolResult",
    "ToolRunner",
]
