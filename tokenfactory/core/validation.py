"""Input validation for principal identifiers and denominations."""

from __future__ import annotations

from typing import Iterable

from .errors import InvalidAddressError, InvalidDenomError

DEFAULT_DENOM_PREFIX = "factory/"


def validate_address(address: str) -> str:
    """Check that ``address`` is a usable principal identifier.

    Identifiers are opaque and compared exactly, so the only rules are that
    they are non-empty and free of whitespace.

    Returns:
        The address unchanged

    Raises:
        InvalidAddressError: If the address is empty or contains whitespace
    """
    if not isinstance(address, str) or not address:
        raise InvalidAddressError(str(address), "address must be a non-empty string")
    if any(ch.isspace() for ch in address):
        raise InvalidAddressError(address, "address must not contain whitespace")
    return address


def validate_denoms(denoms: Iterable[str], prefix: str = DEFAULT_DENOM_PREFIX) -> None:
    """Raise InvalidDenomError on the first denom lacking ``prefix``."""
    for denom in denoms:
        if not denom.startswith(prefix):
            raise InvalidDenomError(denom, f"Denom must start with '{prefix}'")
