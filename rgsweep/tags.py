"""
Tag lookup utilities for retention decisions.

Azure treats tag names as case-insensitive, so lookups go through an index
keyed by the lowercased name.
"""

from typing import Dict, Iterable, Mapping, Optional, Tuple


def build_tag_index(tags: Optional[Mapping[str, str]]) -> Dict[str, Tuple[str, str]]:
    """
    Index tags by lowercased key.

    When several keys collide case-insensitively (e.g. both "KeepIt" and
    "keepit"), the lexicographically smallest original key wins, so the
    result does not depend on the order the provider returned them in.

    Args:
        tags: Resource group tags

    Returns:
        Mapping of lowercased key to (original key, value)
    """
    index: Dict[str, Tuple[str, str]] = {}

    for key in sorted(tags or {}):
        index.setdefault(key.lower(), (key, tags[key]))

    return index


def find_tag(tags: Optional[Mapping[str, str]], key: str) -> Optional[Tuple[str, str]]:
    """
    Find a tag by name, ignoring case.

    Args:
        tags: Resource group tags
        key: Tag name to look for

    Returns:
        (original key, value) if found, None otherwise
    """
    return build_tag_index(tags).get(key.lower())


def parse_name_list(values: Iterable[str]) -> frozenset:
    """
    Parse resource group names given as repeated and/or comma-separated values.

    Args:
        values: Raw values, e.g. ("rg-a,rg-b", "rg-c")

    Returns:
        Set of names with surrounding whitespace removed
    """
    names = set()

    for value in values:
        for name in value.split(","):
            name = name.strip()
            if name:
                names.add(name)

    return frozenset(names)
