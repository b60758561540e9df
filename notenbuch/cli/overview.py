from __future__ import annotations

import asyncio

from rich.console import Console
from rich.table import Table

import notenbuch.lib.cli as click
from notenbuch import overview as overview_
from notenbuch.core import di
from notenbuch.model import GradeLabel
from notenbuch.storage.kv import KeyValueStore
from notenbuch.storage.roster import Roster

console = Console()

_styles = {
    GradeLabel.SehrGut: "green",
    GradeLabel.Gut: "blue",
    GradeLabel.Genuegend: "yellow",
    GradeLabel.Ungenuegend: "red",
}


def render(ov: overview_.Overview) -> Table:
    table = Table(title=f"{ov.template.name} ({ov.template.subject})", header_style="bold magenta")
    table.add_column("Schüler", style="cyan")
    table.add_column("Klasse")
    for c in ov.criteria:
        table.add_column(c.text, justify="right")

    for row in ov.rows:
        cells = [f"[{_styles[cell.grade]}]{cell.display}[/]" if cell.grade else "" for cell in row.cells]
        table.add_row(row.student.name, row.student.class_name, *cells)

    table.add_section()
    for label in GradeLabel:
        counts = [str(ov.grade_counts(c.text)[label]) for c in ov.criteria]
        table.add_row(f"[{_styles[label]}]{label.value}[/]", "", *counts)
    return table


@click.command("overview")
@click.argument("subject")
@click.argument("template_id")
@di.inject
def overview(
    subject: str,
    template_id: str,
    roster: Roster = di.Provide["roster"],
    store: KeyValueStore = di.Provide["storage.store"],
):
    """Show every student's results on a template."""

    async def run():
        await roster.initialize()
        return await overview_.load(subject, template_id, roster=roster, store=store)

    ov = asyncio.run(run())
    if ov is None:
        raise click.ClickException(f"no template {template_id} in {subject}")
    console.print(render(ov))
