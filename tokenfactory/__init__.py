"""Token factory core package.

This package contains:
- config: Configuration loading and management
- core: Authorization guard, configuration store, mint/burn/admin coordinators
"""

from __future__ import annotations

__all__: list[str] = []
