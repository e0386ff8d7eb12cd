"""Resolve supported ``REFSWEEP_*`` values into CLI option defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from .io import die
from .tags import DEFAULT_KEEP, DEFAULT_MONTHS

T = TypeVar("T")

DefaultSource = Literal["cli", "env", "config", "built-in"]


@dataclass(frozen=True)
class CliEnvDefaultMapping:
    """Describe a supported env var to CLI default mapping."""

    flag: str
    env_var: str
    built_in_default: str
    accepted_values: str


@dataclass(frozen=True)
class ResolvedCliDefault(Generic[T]):
    """Represent one resolved CLI default value and where it came from."""

    flag: str
    value: T
    source: DefaultSource
    env_var: str | None = None
    raw_env_value: str | None = None


TAGS_CLI_ENV_DEFAULTS: tuple[CliEnvDefaultMapping, ...] = (
    CliEnvDefaultMapping(
        flag="--keep",
        env_var="REFSWEEP_KEEP",
        built_in_default=str(DEFAULT_KEEP),
        accepted_values="non-negative integer",
    ),
    CliEnvDefaultMapping(
        flag="--months",
        env_var="REFSWEEP_MONTHS",
        built_in_default=str(DEFAULT_MONTHS),
        accepted_values="non-negative integer",
    ),
)

_MAPPING_BY_FLAG = {item.flag: item for item in TAGS_CLI_ENV_DEFAULTS}


def _resolve_count(
    flag: str, explicit: int | None, config_value: int | None
) -> ResolvedCliDefault[int]:
    mapping = _MAPPING_BY_FLAG[flag]
    if explicit is not None:
        return ResolvedCliDefault(flag=flag, value=explicit, source="cli")
    raw = os.environ.get(mapping.env_var, "").strip()
    if raw:
        try:
            value = int(raw)
        except ValueError:
            die(f"{mapping.env_var} must be a {mapping.accepted_values}")
        if value < 0:
            die(f"{mapping.env_var} must be a {mapping.accepted_values}")
        return ResolvedCliDefault(
            flag=flag,
            value=value,
            source="env",
            env_var=mapping.env_var,
            raw_env_value=raw,
        )
    if config_value is not None:
        return ResolvedCliDefault(flag=flag, value=config_value, source="config")
    return ResolvedCliDefault(flag=flag, value=int(mapping.built_in_default), source="built-in")


def resolve_keep_default(
    explicit: int | None, config_value: int | None = None
) -> ResolvedCliDefault[int]:
    """Resolve the value for ``refsweep tags --keep``.

    Args:
        explicit: Explicit ``--keep`` value from CLI arguments.
        config_value: ``tags.keep`` from the project config, if set.

    Returns:
        Resolved count and source metadata.
    """
    return _resolve_count("--keep", explicit, config_value)


def resolve_months_default(
    explicit: int | None, config_value: int | None = None
) -> ResolvedCliDefault[int]:
    """Resolve the value for ``refsweep tags --months``."""
    return _resolve_count("--months", explicit, config_value)


def describe_translated_default(value: ResolvedCliDefault[object]) -> str:
    """Return a human-readable diagnostics message for env translation.

    Args:
        value: Resolved default metadata.

    Returns:
        Diagnostic string describing env-to-CLI default translation.
    """
    env_var = value.env_var or "<unknown>"
    raw = value.raw_env_value if value.raw_env_value is not None else ""
    return f"translated {env_var}={raw!r} into default {value.flag}={value.value!r}"


__all__ = [
    "TAGS_CLI_ENV_DEFAULTS",
    "CliEnvDefaultMapping",
    "ResolvedCliDefault",
    "describe_translated_default",
    "resolve_keep_default",
    "resolve_months_default",
]
