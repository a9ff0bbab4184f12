"""Pytest fixtures for token factory core tests.

Common fixtures: validated settings, stores, and cores that are already
instantiated with a manager, a whitelisted minter and one tracked denom.
"""

from __future__ import annotations

# Load environment variables from .env before any tests run
from dotenv import load_dotenv

load_dotenv()

from pathlib import Path
from typing import Iterator

import pytest

from tokenfactory.config import reset_config
from tokenfactory.config_schema import AppConfig, validate_config_dict
from tokenfactory.core.contract import TokenFactoryCore
from tokenfactory.core.logger import EventLogger
from tokenfactory.core.messages import MessageInfo
from tokenfactory.core.state import Configuration, MemoryConfigStore, SqliteConfigStore

from tests.testing_utils import CONTRACT_ADDRESS, DENOM, MANAGER, MINTER, OTHER_DENOM


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "sqlite: mark test as touching a SQLite database file",
    )
    config.addinivalue_line(
        "markers",
        "scenario(num): mark test as one of the numbered acceptance scenarios",
    )


@pytest.fixture(autouse=True)
def _fresh_global_config() -> Iterator[None]:
    """Each test starts and ends with no cached global config."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def settings() -> AppConfig:
    """Default settings with a fixed contract address."""
    return validate_config_dict({"contract": {"address": CONTRACT_ADDRESS}})


@pytest.fixture
def memory_store() -> MemoryConfigStore:
    return MemoryConfigStore()


@pytest.fixture
def sqlite_store(tmp_path: Path) -> SqliteConfigStore:
    return SqliteConfigStore(tmp_path / "state.db")


@pytest.fixture
def event_logger(tmp_path: Path) -> EventLogger:
    return EventLogger(tmp_path / "events.jsonl")


@pytest.fixture
def core(
    settings: AppConfig, memory_store: MemoryConfigStore, event_logger: EventLogger
) -> TokenFactoryCore:
    """A core instantiated with MANAGER, MINTER on the whitelist and DENOM tracked."""
    tf = TokenFactoryCore(store=memory_store, settings=settings, event_logger=event_logger)
    tf.instantiate(
        MessageInfo(MANAGER),
        {"allowed_mint_addresses": [MINTER], "denoms": [DENOM]},
    )
    return tf


@pytest.fixture
def config() -> Configuration:
    """A configuration snapshot for the pure coordinator tests."""
    return Configuration(
        manager=MANAGER,
        allowed_mint_addresses=[MINTER],
        denoms=[DENOM, OTHER_DENOM],
    )
