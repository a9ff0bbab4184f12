"""Set edits over the mint whitelist and the managed denom list.

Add is an ordered set-union (existing order kept, new entries appended in
first-seen order), Remove is a set-difference. Both are idempotent and
neither mutates the configuration passed in.
"""

from __future__ import annotations

from typing import Iterable

from .state import Configuration


def union(current: Iterable[str], additions: Iterable[str]) -> list[str]:
    """Append entries of ``additions`` not already present."""
    result = list(current)
    seen = set(result)
    for entry in additions:
        if entry not in seen:
            seen.add(entry)
            result.append(entry)
    return result


def difference(current: Iterable[str], removals: Iterable[str]) -> list[str]:
    """Drop every entry of ``removals``; absent entries are ignored."""
    dropped = set(removals)
    return [entry for entry in current if entry not in dropped]


def add_whitelist(config: Configuration, addresses: Iterable[str]) -> Configuration:
    return config.replace(
        allowed_mint_addresses=union(config.allowed_mint_addresses, addresses)
    )


def remove_whitelist(config: Configuration, addresses: Iterable[str]) -> Configuration:
    return config.replace(
        allowed_mint_addresses=difference(config.allowed_mint_addresses, addresses)
    )


def add_denoms(config: Configuration, denoms: Iterable[str]) -> Configuration:
    return config.replace(denoms=union(config.denoms, denoms))


def remove_denoms(config: Configuration, denoms: Iterable[str]) -> Configuration:
    return config.replace(denoms=difference(config.denoms, denoms))
