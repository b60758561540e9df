import asyncio

import notenbuch.lib.cli as click
from notenbuch.core import di
from notenbuch.storage import migration
from notenbuch.storage.kv import KeyValueStore

_messages = {
    migration.MigrationOutcome.Migrated: "migrated {count} students",
    migration.MigrationOutcome.AlreadyMigrated: "roster already migrated, nothing to do",
    migration.MigrationOutcome.NothingToMigrate: "no legacy roster found, nothing to do",
}


@click.command("migrate")
@di.inject
def migrate(store: KeyValueStore = di.Provide["storage.store"]):
    """Copy the student roster from its legacy location."""
    result = asyncio.run(migration.migrate(store=store))
    click.echo(_messages[result.outcome].format(count=result.count))
