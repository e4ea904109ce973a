"""Canonical variant schema.

Stored components carry two naming conventions: the lowercase shadcn style
(`variant`, `size`, values such as `default`, `sm`, `lg`) requested by the
generation prompts, and a legacy PascalCase style (`Type`, `Size`, values such
as `Primary`, `Small`, `Large`). The lowercase style is canonical. Rows are
rewritten once with `design-cms normalize-variants`.
"""
from collections.abc import Mapping, Sequence

GROUP_ALIASES = {
    "type": "variant",
}

VALUE_ALIASES = {
    "small": "sm",
    "base": "default",
    "large": "lg",
}


def normalize_group_name(name: str) -> str:
    key = name.strip().lower()
    return GROUP_ALIASES.get(key, key)


def normalize_option(value: str) -> str:
    option = value.strip().lower()
    return VALUE_ALIASES.get(option, option)


def normalize_variants(variants: Mapping[str, Sequence[str]] | None) -> dict[str, list[str]]:
    """Lower-case group names and options, merging groups that collide."""
    normalized: dict[str, list[str]] = {}
    for group, options in (variants or {}).items():
        key = normalize_group_name(str(group))
        merged = normalized.setdefault(key, [])
        for option in options or []:
            value = normalize_option(str(option))
            if value and value not in merged:
                merged.append(value)
    return normalized


def is_normalized(variants: Mapping[str, Sequence[str]] | None) -> bool:
    current = {str(k): [str(v) for v in (opts or [])] for k, opts in (variants or {}).items()}
    return current == normalize_variants(variants)
