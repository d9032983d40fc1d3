"""Recursive merge of two locale trees."""

from typing import Any, Callable, Dict, List, Mapping, Optional

MergeArrayCallback = Callable[[List[Any], List[Any]], List[Any]]


def is_plain_object(value: Any) -> bool:
    """True for dicts only; lists, None and scalars are not objects."""
    return isinstance(value, dict)


def deep_merge(
    target: Mapping[str, Any],
    source: Mapping[str, Any],
    merge_array: Optional[MergeArrayCallback] = None,
) -> Dict[str, Any]:
    """
    Deep-merge ``source`` into a copy of ``target``.

    Neither argument is modified. Keys only in ``target`` are kept as they
    are. For keys in ``source``:

    - dict values are merged recursively; if the target value is not a
      dict it is discarded and the merge starts from ``{}``
    - list values go through ``merge_array(target_list, source_list)``
      when given (``target_list`` is ``[]`` if the target value is not a
      list), otherwise the source list replaces the target value
    - anything else overwrites the target value

    Args:
        target: Base mapping
        source: Mapping whose values take precedence
        merge_array: Optional list merge strategy

    Returns:
        New merged dict

    Example:
        >>> deep_merge({'x': 1, 'n': {'y': 2, 'z': 3}}, {'n': {'y': 99}, 'extra': 'new'})
        {'x': 1, 'n': {'y': 99, 'z': 3}, 'extra': 'new'}
        >>> deep_merge({'tags': [1, 2]}, {'tags': [2, 3]},
        ...            lambda a, b: a + [v for v in b if v not in a])
        {'tags': [1, 2, 3]}
    """
    merged: Dict[str, Any] = dict(target)

    for key, source_value in source.items():
        target_value = merged.get(key)

        if is_plain_object(source_value):
            base = target_value if is_plain_object(target_value) else {}
            merged[key] = deep_merge(base, source_value, merge_array)
        elif isinstance(source_value, list):
            if merge_array is not None:
                current = target_value if isinstance(target_value, list) else []
                merged[key] = merge_array(current, source_value)
            else:
                merged[key] = source_value
        else:
            merged[key] = source_value

    return merged
