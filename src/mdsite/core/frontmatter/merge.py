"""Priority-ordered front matter patch application with deep merge rules"""

import copy
from collections.abc import Mapping
from typing import Any, Iterable

from mdsite.core.frontmatter.patch import ArrayStrategy, FrontMatterPatch, MergeMode


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def clone(value: Any) -> Any:
    """Deep copy a front matter value; mappings become dicts and sequences become lists."""
    if isinstance(value, Mapping):
        return {k: clone(v) for k, v in value.items()}
    if _is_sequence(value):
        return [clone(v) for v in value]
    return copy.deepcopy(value)


def same_value(a: Any, b: Any) -> bool:
    """Equality that keeps bools apart from numbers (True != 1), recursing into containers."""
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        return a.keys() == b.keys() and all(same_value(a[k], b[k]) for k in a)
    if _is_sequence(a) and _is_sequence(b):
        return len(a) == len(b) and all(same_value(x, y) for x, y in zip(a, b))
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    return a == b


def merge_sequences(existing: list, new: Iterable, strategy: ArrayStrategy) -> list:
    """Combine two sequences per strategy; returns a fresh list."""
    if strategy is ArrayStrategy.replace:
        return clone(list(new))
    if strategy is ArrayStrategy.append:
        return clone(list(existing)) + clone(list(new))

    # union: existing order first, then new items not already present (by equality)
    result = clone(list(existing))
    for item in new:
        if not any(same_value(item, seen) for seen in result):
            result.append(clone(item))
    return result


def deep_merge(target: dict, data: Mapping, strategy: ArrayStrategy = ArrayStrategy.union) -> dict:
    """Merge data into target in place. Nested mappings recurse; scalars and mismatches replace."""
    for key, new in data.items():
        old = target.get(key)
        if key in target and isinstance(old, Mapping) and isinstance(new, Mapping):
            if not isinstance(old, dict):
                old = target[key] = clone(old)
            deep_merge(old, new, strategy)
        elif key in target and _is_sequence(old) and _is_sequence(new):
            target[key] = merge_sequences(old, new, strategy)
        else:
            target[key] = clone(new)
    return target


def apply_patch(target: dict, patch: FrontMatterPatch) -> dict:
    """Apply one patch to target in place according to its mode."""
    if patch.mode is MergeMode.replace:
        for key, value in patch.data.items():
            target[key] = clone(value)
    elif patch.mode is MergeMode.set_if_missing:
        for key, value in patch.data.items():
            if key not in target:
                target[key] = clone(value)
    elif patch.mode is MergeMode.deep:
        deep_merge(target, patch.data, patch.array_strategy)
    else:
        raise ValueError(f"Unknown merge mode: {patch.mode!r}")
    return target


def sort_patches(patches: Iterable[FrontMatterPatch]) -> list[FrontMatterPatch]:
    """Stable ascending priority order; ties keep submission order."""
    return sorted(patches, key=lambda p: p.priority)


def apply_patches(base: Mapping | None, patches: Iterable[FrontMatterPatch]) -> dict:
    """Fold patches over a deep clone of base. Neither base nor any patch data is mutated."""
    result = clone(base) if base else {}
    for patch in sort_patches(patches):
        apply_patch(result, patch)
    return result
