"""Main CLI application using Cyclopts."""

import cyclopts

from metad.cli.commands import fingerprint, records, run

app = cyclopts.App(
    name="metad",
    help="Seismic station metadata pipeline daemon",
)

app.command(run.run, name="run")
app.command(records.snapshot, name="snapshot")
app.command(records.records, name="records")
app.command(fingerprint.fingerprint, name="fingerprint")


def main() -> None:
    app()
