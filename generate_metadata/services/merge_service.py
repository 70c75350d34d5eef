"""
Merge Engine

Combines caller fallback, generated and caller override metadata, with
priority ``override > generated > fallback``. Two strategies:

- :func:`deep_merge` for nested key/value output. Later sources overwrite
  earlier ones key by key at every level; ``None`` values and missing keys
  leave the earlier value alone; lists are atomic and replaced whole.
- :func:`merge_tags` for ordered lists of tag records, deduplicated by
  :func:`dedup_key` across sources.
"""

import copy
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

Tag = Mapping[str, Any]


def deep_merge(*sources: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Deep-merge mappings left to right into a new dict.

    Inputs are never mutated. Keys absent from every source are absent from
    the result.

    Example:
        >>> deep_merge({"title": "F", "description": "Fd"}, {"title": "G"}, {"title": "O"})
        {'title': 'O', 'description': 'Fd'}
    """
    result: dict[str, Any] = {}
    for source in sources:
        if source:
            _merge_into(result, source)
    return result


def _merge_into(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            existing = target.get(key)
            if not isinstance(existing, dict):
                existing = {}
                target[key] = existing
            _merge_into(existing, value)
        else:
            target[key] = copy.deepcopy(value)


def dedup_key(tag: Tag) -> str | None:
    """
    Identity of a tag record for deduplication.

    ``name`` wins over ``property``, which wins over ``title``. Records
    without any of them have no key and are never deduplicated.
    """
    if tag.get("name") is not None:
        return f"name:{tag['name']}"
    if tag.get("property") is not None:
        return f"property:{tag['property']}"
    if tag.get("title") is not None:
        return "title"
    return None


def merge_tags(*sources: Sequence[Tag] | None) -> list[dict[str, Any]]:
    """
    Merge tag lists given in increasing priority order.

    A record is dropped when a higher-priority source defines a record with
    the same dedup key, so each key survives only from the highest-priority
    source that defines it. Records sharing a key inside a single source
    (e.g. several ``og:image`` entries) are kept together. Survivors keep
    their order, grouped by source, which places a promoted key at the
    position of the source that won it.
    """
    lists = [list(source or []) for source in sources]

    claimed: set[str] = set()
    survivors: list[list[dict[str, Any]]] = []
    for tags in reversed(lists):
        kept = []
        keys_here = set()
        for tag in tags:
            key = dedup_key(tag)
            if key is not None:
                if key in claimed:
                    continue
                keys_here.add(key)
            kept.append(dict(tag))
        claimed |= keys_here
        survivors.append(kept)

    return [tag for kept in reversed(survivors) for tag in kept]


def merge_head(*sources: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Merge head structures (``{"meta": [...], "links": [...], ...}``).

    List-valued keys go through :func:`merge_tags`; any other value is taken
    from the highest-priority source that sets it.
    """
    present = [source for source in sources if source]
    result: dict[str, Any] = {}
    for key in _ordered_keys(present):
        values = [source.get(key) for source in present]
        if any(isinstance(value, list) for value in values):
            result[key] = merge_tags(*(value if isinstance(value, list) else None for value in values))
            continue
        for value in reversed(values):
            if value is not None:
                result[key] = copy.deepcopy(value)
                break
    return result


def _ordered_keys(sources: Iterable[Mapping[str, Any]]) -> list[str]:
    keys: dict[str, None] = {}
    for source in sources:
        keys.update(dict.fromkeys(source))
    return list(keys)
