"""Caller checks for manager-only and whitelist-only operations.

Pure predicates over a configuration snapshot. The dispatcher runs them
after loading and before computing anything, so a rejected caller never
reaches a coordinator.
"""

from __future__ import annotations

import logging

from .errors import UnauthorizedError
from .state import Configuration

logger = logging.getLogger(__name__)


def is_manager(config: Configuration, caller: str) -> bool:
    """Check whether ``caller`` is the configured manager."""
    return caller == config.manager


def is_whitelisted(config: Configuration, caller: str) -> bool:
    """Check whether ``caller`` may request minting."""
    return caller in config.allowed_mint_addresses


def require_manager(config: Configuration, caller: str) -> None:
    """Raise UnauthorizedError unless ``caller`` is the manager."""
    if not is_manager(config, caller):
        logger.warning("Rejected manager-only call from %s", caller)
        raise UnauthorizedError(caller, f"{caller} is not the contract manager")


def require_whitelisted(config: Configuration, caller: str) -> None:
    """Raise UnauthorizedError unless ``caller`` is on the mint whitelist."""
    if not is_whitelisted(config, caller):
        logger.warning("Rejected mint request from non-whitelisted %s", caller)
        raise UnauthorizedError(caller, f"{caller} is not whitelisted to mint")
