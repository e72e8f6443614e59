from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import MetadataStatus
from metad.domain.metadata.stage.tool import ToolStage


class ConvertStage(ToolStage):
    """Converts the staged StationXML file to SC3ML with fdsnxml2inv."""

    __stage_name__ = "convert"
    __success_status__ = MetadataStatus.CONVERTED

    def command(self, record: MetadataRecord) -> list[str]:
        return self._exec(
            self._config.converter,
            record.artifact(self._config.raw_suffix),
            "-f",
            record.artifact(self._config.converted_suffix),
        )
