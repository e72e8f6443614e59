from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import MetadataStatus
from metad.domain.metadata.stage.tool import ToolStage


class MergeStage(ToolStage):
    """Merges the station's SC3ML file into its network prototype with scinv.

    The prototype is rewritten in place. A failed merge is not rolled back;
    scinv owns the atomicity of its output file.
    """

    __stage_name__ = "merge"
    __success_status__ = MetadataStatus.MERGED

    def command(self, record: MetadataRecord) -> list[str]:
        prototype = self._config.prototype(record.network)
        return self._exec(
            self._config.merger,
            "merge",
            prototype,
            record.artifact(self._config.converted_suffix),
            "-o",
            prototype,
        )
