from __future__ import annotations

import os
import types
import typing as t
from pathlib import Path

import pydantic as p
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Object, Provider, Resource, Singleton

import notenbuch
from notenbuch.lib import NotReady
from notenbuch.model import BaseModel, DeploymentEnvironment, Student
from notenbuch.storage.kv import KeyValueStore
from notenbuch.storage.roster import Roster

from ..config import Settings
from ..provider import LoggingProvider, TimestampProvider, utcnow
from .storage import StorageContainer


def provide_roster(
    store: KeyValueStore,
    default_subjects: list[str],
    default_students: list[dict[str, t.Any]],
) -> Roster:
    return Roster(
        store,
        default_subjects=default_subjects,
        default_students=[Student.model_validate(s) for s in default_students],
    )


class BootConfiguration(BaseModel):
    debug: bool
    env: DeploymentEnvironment
    config_root: p.AnyUrl
    override: tuple[str, ...]


class NotenbuchContainer(DeclarativeContainer):
    config: Configuration = Configuration()

    debug: Provider[bool] = Singleton(bool)
    env: Provider[DeploymentEnvironment] = Singleton(DeploymentEnvironment)
    root: Object[NotReady | Path] = Object(NotReady())

    logging: Provider[LoggingProvider] = Resource(LoggingProvider, config=config.logging, debug=debug)
    storage: Provider[StorageContainer] = Container(StorageContainer, config=config.storage, logging=logging)

    utcnow: Provider[TimestampProvider] = Object(utcnow)
    roster: Provider[Roster] = Singleton(
        provide_roster,
        store=storage.store,
        default_subjects=config.roster.default_subjects,
        default_students=config.roster.default_students,
    )

    _boot_config: Provider[BootConfiguration | NotReady] = Object(NotReady())

    @staticmethod
    def boot(
        ct: NotenbuchContainer,
        /,
        debug: bool,
        env: DeploymentEnvironment,
        config_root: p.FileUrl,
        override: tuple[str, ...] | None = None,
        wiring: tuple[str | types.ModuleType, ...] | None = None,
    ):
        if config_root.scheme != "file":
            raise ValueError(f"unsupported scheme for config root: {config_root.scheme}")
        ps = Settings(env=env, root=config_root, override=override or ())
        ct.config.from_pydantic(ps)
        ct.wire(packages=["notenbuch"])
        if wiring:
            ct.wire(modules=wiring)

        logger = ct.logging().get_logger()

        for ov in ps.override:
            k, v = ov.split("=", 1)
            logger.info(
                "overriding configuration parameter",
                extra={
                    "key": k,
                    "value": v,
                },
            )

        ct.debug.override(debug)
        ct.env.override(env)
        ct.root.override(Path(os.path.dirname(notenbuch.__file__)).parent)
        if debug:
            ct.logging().capture_warnings(True)

        logger.debug(
            "configuration finished",
            extra={
                "config": str(config_root),
            },
        )
        ct._boot_config.override(
            BootConfiguration(debug=debug, env=env, config_root=config_root, override=override or ())
        )
