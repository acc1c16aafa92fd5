from __future__ import annotations

import importlib.resources as importlib_resources
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from mcmeta.meta.errors import E_FLAG_NOT_ALLOWED, E_UNKNOWN_COMMAND
from mcmeta.meta.flags import REQUEST_FLAG_KEYS, FlagDirective


class CommandSpec(BaseModel):
    description: str = ""
    flags: List[str] = Field(min_length=1)
    modes: List[str] = Field(default_factory=list)

    @field_validator("flags")
    @classmethod
    def _known_flags(cls, v: List[str]) -> List[str]:
        for k in v:
            if k not in REQUEST_FLAG_KEYS:
                raise ValueError(f"unknown request flag: {k!r}")
        if len(v) != len(set(v)):
            raise ValueError("duplicate flag keys found")
        return v

    @model_validator(mode="after")
    def _modes_need_m(self) -> "CommandSpec":
        if self.modes and "M" not in self.flags:
            raise ValueError("modes given but flag M is not accepted")
        return self


class CatalogDoc(BaseModel):
    commands: Dict[str, CommandSpec] = Field(min_length=1)

    @field_validator("commands")
    @classmethod
    def _command_names(cls, v: Dict[str, CommandSpec]) -> Dict[str, CommandSpec]:
        for name in v:
            if not name or name != name.lower() or not name.isalpha():
                raise ValueError(f"bad command name: {name!r}")
        return v


@dataclass(frozen=True)
class CommandRule:
    name: str
    description: str
    flags: FrozenSet[str]
    modes: FrozenSet[str]


@dataclass(frozen=True)
class Catalog:
    commands: Dict[str, CommandRule]

    def rule(self, command: str) -> CommandRule:
        try:
            return self.commands[command]
        except KeyError:
            raise CatalogViolation(E_UNKNOWN_COMMAND, f"Unknown meta command: {command}") from None


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects repeated mapping keys instead of keeping the last one."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping", node.start_mark, f"found duplicate key {key!r}", key_node.start_mark
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


class CatalogViolation(ValueError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


def _read_catalog_text(path: Optional[Path]) -> str:
    """Resolve catalog YAML text.

    Order:
    1) Explicit path arg
    2) MCMETA_CATALOG env var (if set)
    3) Packaged default (mcmeta/resources/meta_commands.yaml)
    """
    if path is not None:
        return path.read_text(encoding="utf-8")

    env_path = os.getenv("MCMETA_CATALOG", "").strip()
    if env_path:
        return Path(env_path).read_text(encoding="utf-8")

    return importlib_resources.files("mcmeta").joinpath("resources/meta_commands.yaml").read_text(encoding="utf-8")


def load_catalog(path: Optional[Path] = None) -> Catalog:
    """Load + validate the meta command catalog."""
    try:
        raw: Dict[str, Any] = yaml.load(_read_catalog_text(path), Loader=_UniqueKeyLoader) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid meta command catalog: {path or '(default)'}\n{e}") from e
    try:
        parsed = CatalogDoc.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid meta command catalog: {path or '(default)'}\n{e}") from e

    rules = {
        name: CommandRule(name=name, description=c.description, flags=frozenset(c.flags), modes=frozenset(c.modes))
        for name, c in parsed.commands.items()
    }
    return Catalog(commands=rules)


def check_directives(catalog: Catalog, command: str, directives: Iterable[FlagDirective]) -> None:
    """Raise CatalogViolation if any directive is not accepted by ``command``."""
    rule = catalog.rule(command)
    for d in directives:
        if d.key not in rule.flags:
            raise CatalogViolation(E_FLAG_NOT_ALLOWED, f"{command} does not accept flag {d.key}")
        if d.key == "M" and rule.modes and d.argument not in rule.modes:
            raise CatalogViolation(E_FLAG_NOT_ALLOWED, f"{command} does not accept mode {d.argument}")
