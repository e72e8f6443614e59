"""Pipeline stages and the status -> stage dispatcher."""

from metad.domain.metadata.stage.base import Stage
from metad.domain.metadata.stage.check import CheckStage
from metad.domain.metadata.stage.convert import ConvertStage
from metad.domain.metadata.stage.dispatcher import StageDispatcher
from metad.domain.metadata.stage.merge import MergeStage

__all__ = ["CheckStage", "ConvertStage", "MergeStage", "Stage", "StageDispatcher"]
