"""Small mapping helpers shared across modules."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any


def mixin(
    target: MutableMapping[str, Any],
    source: Mapping[str, Any] | None,
    force: bool = False,
    deep_string_mixin: bool = False,
) -> MutableMapping[str, Any]:
    """Copy keys from ``source`` into ``target`` and return ``target``.

    Keys already present in ``target`` are left alone unless ``force`` is set.
    With ``deep_string_mixin``, nested mappings are merged key by key into
    ``target`` instead of replacing the existing value; strings and other
    leaf values are always assigned directly.
    """
    if not source:
        return target
    for key, value in source.items():
        if not force and key in target:
            continue
        if deep_string_mixin and isinstance(value, Mapping):
            if not isinstance(target.get(key), MutableMapping):
                target[key] = {}
            mixin(target[key], value, force, deep_string_mixin)
        else:
            target[key] = value
    return target
