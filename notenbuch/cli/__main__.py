from __future__ import annotations

import importlib
import sys
import traceback
import types
import typing as t
from pathlib import Path

import pydantic as p

import notenbuch
import notenbuch.lib.cli as click
from notenbuch.core import di, NotenbuchContainer
from notenbuch.model import DeploymentEnvironment

CONFIG_ROOT = Path(notenbuch.__file__).resolve().parents[1] / "config"
COMMANDS = ("migrate", "overview", "template")

_loaded: list[types.ModuleType] = []


class LazyGroup(click.Group):
    """Imports `notenbuch.cli.<name>` only when its command is run."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(COMMANDS)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in COMMANDS:
            return None
        mod = importlib.import_module(f"{__package__}.{cmd_name}")
        _loaded.append(mod)
        return getattr(mod, cmd_name)


@click.group(cls=LazyGroup)
@click.option("-E", "--env", default=DeploymentEnvironment.Local, type=click.EnumType(DeploymentEnvironment))
@click.option("-c", "--config-root", default=CONFIG_ROOT, type=click.URIParamType(dir_ok=True))
@click.option(
    "-o",
    "--override",
    multiple=True,
    help="override a configuration value by its dotted path, e.g., -o storage.backend=redis",
)
@click.option("-D", "--debug", is_flag=True, default=False)
@click.pass_obj
@di.inject
def main(
    ct: NotenbuchContainer,
    env: DeploymentEnvironment,
    config_root: p.FileUrl,
    override: tuple[str, ...],
    debug: bool,
):
    NotenbuchContainer.boot(
        ct,
        debug=debug,
        env=env,
        config_root=config_root,
        override=override,
        wiring=tuple(_loaded),
    )


def _fail(ex: Exception, show_traceback: bool) -> t.NoReturn:
    click.echo(click.style("ERROR ", fg="red"), nl=False, file=sys.stderr)
    click.echo(str(ex), file=sys.stderr)
    if show_traceback:
        traceback.print_exc()
    sys.exit(ex.exit_code if isinstance(ex, click.ClickException) else -1)


def execute_command(*_args: str) -> None:
    prog, *args = _args or sys.argv
    container = NotenbuchContainer()

    try:
        with main.make_context(Path(prog).name, args=args) as ctx:
            ctx.obj = container
            main.invoke(ctx)
    except (EOFError, KeyboardInterrupt, click.Abort):
        click.echo("Aborted!", file=sys.stderr)
        sys.exit(1)
    except click.exceptions.Exit as ex:
        sys.exit(ex.exit_code)
    except Exception as ex:
        _fail(ex, show_traceback="-D" in args or "--debug" in args)
    finally:
        container.shutdown_resources()
    sys.exit(0)


if __name__ == "__main__":
    execute_command(*sys.argv)
