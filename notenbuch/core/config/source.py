import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsError

from notenbuch.model import DeploymentEnvironment


class CurrentState(t.TypedDict, total=False):
    root: t.Required[p.AnyUrl]
    env: t.Required[DeploymentEnvironment]
    override: t.Required[tuple[str, ...]]


SKIP_KEYS = frozenset({"env", "root", "override"})


class SettingsSource(PydanticBaseSettingsSource):
    def __call__(self) -> dict[str, t.Any]:
        # we expect init kwargs to have config root and env in them
        data: dict[str, t.Any] = {}

        for field_name, field in self.settings_cls.model_fields.items():
            try:
                field_value, field_key, value_is_complex = self.get_field_value(field, field_name)
                field_value = self.prepare_field_value(field_name, field, field_value, value_is_complex)
            except KeyError:
                continue
            except ValueError as e:
                raise SettingsError(f"error parsing value for field {field_name!r} from source {self!r}") from e
            except Exception as e:
                raise SettingsError(f"error getting value for field {field_name!r} from source {self!r}") from e

            data[field_key] = field_value
        return data


class OverrideSettingsSource(SettingsSource):
    """Apply ``key.path=value`` overrides given on the command line."""

    @functools.cached_property
    def parsed_options(self) -> dict[str, t.Any]:
        current_state = t.cast(CurrentState, self.current_state)
        od: dict[str, t.Any] = {}
        for o in current_state["override"]:
            k, v = [s.strip() for s in o.split("=", 1)]

            target = od
            path = k.split(".")
            for key in path[:-1]:
                target = target.setdefault(key, {})
            target[path[-1]] = yaml.safe_load(v)
        return od

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name in SKIP_KEYS or field_name not in self.parsed_options:
            raise KeyError(field_name)
        # nested values are merged into the YAML settings by pydantic-settings
        return self.parsed_options[field_name], field_name, True

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        return value


class YAMLCascadingSettingsSource(SettingsSource):
    """Read ``<field>.yaml`` from the config root, then from ``env.d/<env>/``.

    The most specific file found wins outright; files are not merged.
    """

    @functools.cached_property
    def load_paths(self) -> list[Path]:
        current_state = t.cast(CurrentState, self.current_state)
        root = current_state["root"]
        assert root.scheme == "file" and root.path is not None, "root is not a legible location of YAML files"
        env = current_state["env"]
        paths = [Path(root.path)]
        if env is not DeploymentEnvironment.Local:
            # we don't have a special directory for local/ that's just root
            paths.append(Path(root.path) / "env.d" / env.value)
        return paths

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        yamls: list[str] = []
        for path in self.load_paths:
            fn = path / f"{field_name}.yaml"
            if fn.exists():
                yamls.append(fn.read_text(encoding="utf8"))
        if not yamls:
            raise KeyError(field_name)
        return yamls, field_name, True

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        # for complex values, we expect to be given a list[str] representing
        # the yamls encountered along the load_paths
        if not isinstance(value, list):
            raise ValueError(field_name)
        yamls = t.cast(list[str], value)
        return yaml.safe_load(yamls[-1])
