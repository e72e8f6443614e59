"""Pipeline infrastructure - driver and DI provider.

Import modules directly:
    from metad.infrastructure.pipeline.di import PipelineProvider
    from metad.infrastructure.pipeline.driver import PipelineDriver
"""

__all__: list[str] = []
