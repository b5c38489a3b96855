"""Typed merge of caller overrides onto default build options.

Every ``BuildOptions`` field has exactly one declared policy in
``FIELD_POLICIES``:

* ``REPLACE`` -- the override wins when given.
* ``CONCAT``  -- default items first, then override items; no dedup.
* ``UPDATE``  -- mapping merged key by key; list values under a shared key
  are concatenated, anything else is replaced.
* ``NESTED``  -- the field is a sub-model merged with its own policy table
  (see ``NESTED_POLICIES``).

Only fields present in ``overrides.model_fields_set`` take part, so leaving a
field out and passing ``None`` explicitly are different things.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel

from .models import (
    BuildOptions,
    HtmlOptions,
    PartialBuildOptions,
    ScriptTransformOptions,
)


class MergePolicy(str, Enum):
    REPLACE = "replace"
    CONCAT = "concat"
    UPDATE = "update"
    NESTED = "nested"


FIELD_POLICIES: dict[str, MergePolicy] = {
    "mode": MergePolicy.REPLACE,
    "context": MergePolicy.REPLACE,
    "minimize": MergePolicy.REPLACE,
    "source_map": MergePolicy.REPLACE,
    "devtool": MergePolicy.REPLACE,
    "exclude_pattern": MergePolicy.REPLACE,
    "output_path": MergePolicy.REPLACE,
    "html": MergePolicy.NESTED,
    "entry": MergePolicy.UPDATE,
    "plugins": MergePolicy.CONCAT,
    "copy_patterns": MergePolicy.CONCAT,
    "rules": MergePolicy.CONCAT,
    "script_transform": MergePolicy.NESTED,
    "include_paths": MergePolicy.CONCAT,
    "split_chunks": MergePolicy.REPLACE,
    "runtime_chunk": MergePolicy.REPLACE,
    "font_marker": MergePolicy.REPLACE,
}

NESTED_POLICIES: dict[str, tuple[type[BaseModel], dict[str, MergePolicy]]] = {
    "html": (
        HtmlOptions,
        {
            "template": MergePolicy.REPLACE,
            "title": MergePolicy.REPLACE,
        },
    ),
    "script_transform": (
        ScriptTransformOptions,
        {
            "cache_directory": MergePolicy.REPLACE,
            "presets": MergePolicy.CONCAT,
            "plugins": MergePolicy.CONCAT,
        },
    ),
}


def merge_options(defaults: BuildOptions, overrides: PartialBuildOptions) -> BuildOptions:
    """Merge *overrides* onto *defaults* and return a new ``BuildOptions``.

    Neither argument is modified.
    """
    merged = _merge_fields(defaults, overrides, FIELD_POLICIES)
    return BuildOptions.model_validate(merged)


def _merge_fields(
    base: BaseModel,
    override: BaseModel,
    policies: dict[str, MergePolicy],
) -> dict[str, Any]:
    result: dict[str, Any] = {}
    given = override.model_fields_set

    for name, policy in policies.items():
        current = getattr(base, name)
        if name not in given:
            result[name] = current
            continue

        incoming = getattr(override, name)
        if policy is MergePolicy.REPLACE:
            result[name] = incoming
        elif policy is MergePolicy.CONCAT:
            result[name] = (*current, *(incoming or ()))
        elif policy is MergePolicy.UPDATE:
            result[name] = _update_mapping(current, incoming or {})
        elif policy is MergePolicy.NESTED:
            model_cls, nested = NESTED_POLICIES[name]
            if incoming is None:
                result[name] = current
            else:
                result[name] = model_cls.model_validate(
                    _merge_fields(current, incoming, nested)
                )
        else:  # pragma: no cover - exhaustive over MergePolicy
            raise ValueError(f"Unknown merge policy for {name!r}: {policy}")

    return result


def _update_mapping(current: dict[str, Any], incoming: dict[str, Any]) -> dict[str, Any]:
    merged = dict(current)
    for key, value in incoming.items():
        existing = merged.get(key)
        if isinstance(existing, list) and isinstance(value, list):
            merged[key] = [*existing, *value]
        else:
            merged[key] = value
    return merged
