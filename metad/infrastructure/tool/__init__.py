from metad.infrastructure.tool.di import ToolProvider

__all__ = ["ToolProvider"]
