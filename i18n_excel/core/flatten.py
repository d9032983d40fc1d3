"""Conversion between nested locale trees and flat dotted keys.

A locale tree is whatever ``json.load`` returns for a locale file: dicts,
lists and scalars. Flattening walks it and records every scalar leaf under
a dotted path; list elements use their index as the path segment, so
``{"a": [{"b": 1}]}`` becomes ``{"a.0.b": "1"}``. Un-flattening reverses
this, choosing a list or a dict for each container by looking at whether
the following segment is a decimal index.
"""

import re
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from .errors import KeyShapeConflictError

JSONScalar = Union[str, int, float, bool, None]
JSONValue = Union[JSONScalar, List[Any], Dict[str, Any]]

_ARRAY_INDEX = re.compile(r'[0-9]+')


class ShapeConflictPolicy(Enum):
    """What to do when a key disagrees with the shape already built."""
    OVERWRITE = "overwrite"  # last write wins, earlier content is dropped
    STRICT = "strict"        # raise KeyShapeConflictError


def is_array_index(segment: str) -> bool:
    """Return True if a path segment addresses a list element."""
    return bool(_ARRAY_INDEX.fullmatch(segment))


def scalar_to_str(value: JSONScalar) -> str:
    """Render a leaf value the way it appears in a spreadsheet cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def flatten_object(tree: Union[Mapping[str, Any], List[Any]], prefix: str = "") -> Dict[str, str]:
    """
    Flatten a nested tree into ``{dotted.key: text}``.

    Args:
        tree: Dict or list to flatten
        prefix: Path of ``tree`` inside its parent ("" for the root)

    Returns:
        One entry per scalar leaf, in traversal order
    """
    result: Dict[str, str] = {}

    if isinstance(tree, list):
        entries = ((str(i), v) for i, v in enumerate(tree))
    else:
        entries = tree.items()

    for key, value in entries:
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, (dict, list)):
            result.update(flatten_object(value, full_key))
        else:
            result[full_key] = scalar_to_str(value)

    return result


def _kind(value: Any) -> str:
    if isinstance(value, list):
        return "an array"
    if isinstance(value, dict):
        return "an object"
    return "a value"


def _get(container: Union[Dict[str, Any], List[Any]], segment: str) -> Any:
    if isinstance(container, list):
        index = int(segment)
        return container[index] if index < len(container) else None
    return container.get(segment)


def _put(container: Union[Dict[str, Any], List[Any]], segment: str, value: Any) -> None:
    if isinstance(container, list):
        index = int(segment)
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
    else:
        container[segment] = value


def set_nested_key(
    tree: Dict[str, Any],
    key_path: str,
    value: Any,
    policy: ShapeConflictPolicy = ShapeConflictPolicy.OVERWRITE,
) -> None:
    """
    Store ``value`` at a dotted path inside ``tree``, creating containers.

    Each intermediate container is a list when the next segment is a
    decimal index and a dict otherwise. A missing or scalar entry is
    replaced by a fresh container. An entry of the wrong container kind is
    replaced too under ``OVERWRITE``; under ``STRICT`` that, or assigning
    over an existing scalar or container, raises ``KeyShapeConflictError``.

    Args:
        tree: Root dict, modified in place
        key_path: Dotted key such as ``"menu.items.0.title"``
        value: Leaf value, stored as given
        policy: Conflict policy
    """
    segments = key_path.split('.')
    current: Union[Dict[str, Any], List[Any]] = tree

    for depth, segment in enumerate(segments[:-1]):
        next_is_index = is_array_index(segments[depth + 1])
        existing = _get(current, segment)

        wanted_list = next_is_index
        if isinstance(existing, list) and wanted_list:
            current = existing
            continue
        if isinstance(existing, dict) and not wanted_list:
            current = existing
            continue

        if existing is not None and policy is ShapeConflictPolicy.STRICT:
            raise KeyShapeConflictError(
                key=key_path,
                path='.'.join(segments[:depth + 1]),
                expected="an array" if wanted_list else "an object",
                found=_kind(existing),
            )

        fresh: Union[Dict[str, Any], List[Any]] = [] if wanted_list else {}
        _put(current, segment, fresh)
        current = fresh

    last = segments[-1]
    if policy is ShapeConflictPolicy.STRICT:
        existing = _get(current, last)
        if existing is not None:
            raise KeyShapeConflictError(
                key=key_path,
                path=key_path,
                expected="a single value",
                found=_kind(existing),
            )
    _put(current, last, value)


def set_top_level_key(
    tree: Dict[str, Any],
    key: str,
    value: Any,
    policy: ShapeConflictPolicy = ShapeConflictPolicy.OVERWRITE,
) -> None:
    """Store ``value`` under ``key`` verbatim, without splitting on dots."""
    if policy is ShapeConflictPolicy.STRICT and tree.get(key) is not None:
        raise KeyShapeConflictError(
            key=key, path=key, expected="a single value", found=_kind(tree[key])
        )
    tree[key] = value


def unflatten(
    flat: Mapping[str, Any],
    policy: ShapeConflictPolicy = ShapeConflictPolicy.OVERWRITE,
    tree: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Rebuild a nested tree from a ``{dotted.key: value}`` mapping."""
    result: Dict[str, Any] = {} if tree is None else tree
    for key, value in flat.items():
        set_nested_key(result, key, value, policy)
    return result
