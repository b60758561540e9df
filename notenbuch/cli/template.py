from __future__ import annotations

import asyncio
import typing as t

from rich.console import Console
from rich.table import Table

import notenbuch.lib.cli as click
from notenbuch.core import di
from notenbuch.storage import template as template_storage
from notenbuch.storage.kv import KeyValueStore
from notenbuch.storage.roster import Roster

console = Console()


@click.group("template")
def template(): ...


@template.command("list")
@click.argument("subject")
@di.inject
def list_(subject: str, store: KeyValueStore = di.Provide["storage.store"]):
    """List the templates of SUBJECT."""
    summaries = asyncio.run(template_storage.list_by_subject(subject, store=store))
    if not summaries:
        click.echo(f"no templates for {subject}")
        return

    table = Table(title=subject, header_style="bold magenta")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Kriterien", justify="right")
    table.add_column("Punkte", justify="right")
    table.add_column("Erstellt")
    for s in sorted(summaries, key=lambda s: s.created_at, reverse=True):
        table.add_row(
            s.template_id,
            s.name,
            str(s.criterion_count),
            str(s.total_points) if s.total_points is not None else "",
            s.created_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@template.command()
@click.argument("template_id")
@di.inject
def show(template_id: str, store: KeyValueStore = di.Provide["storage.store"]):
    """Show the criteria of a template."""
    tpl = asyncio.run(template_storage.get(template_id, store=store))
    if tpl is None:
        raise click.ClickException(f"no such template: {template_id}")

    table = Table(title=f"{tpl.name} ({tpl.subject})", header_style="bold magenta")
    table.add_column("Kriterium", style="cyan")
    table.add_column("Max. Punkte", justify="right")
    for c in tpl.criteria:
        table.add_row(c.text, str(c.max_points) if c.points_graded else "")
    console.print(table)


@template.command("import")
@click.argument("name")
@click.argument("subject")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--points", default=template_storage.BULK_POINTS_PER_LINE, type=click.IntRange(min=1))
@di.inject
def import_(
    name: str,
    subject: str,
    source: t.TextIO,
    points: int,
    roster: Roster = di.Provide["roster"],
    store: KeyValueStore = di.Provide["storage.store"],
):
    """Create a template from SOURCE, one criterion per line."""

    async def run():
        await roster.initialize()
        return await template_storage.create_bulk(
            name, subject, source.read(), points_per_line=points, known_subjects=roster.subjects, store=store
        )

    tpl = asyncio.run(run())
    click.echo(f"saved {tpl.template_id} with {len(tpl.criteria)} criteria, {tpl.total_points} points")


@template.command()
@click.argument("template_id")
@di.inject
def delete(template_id: str, store: KeyValueStore = di.Provide["storage.store"]):
    """Delete a template; recorded grades are kept."""
    if not asyncio.run(template_storage.delete(template_id, store=store)):
        raise click.ClickException(f"no such template: {template_id}")
    click.echo(f"deleted {template_id}")
