"""Dispatcher for instantiate, execute and query.

Every execute call runs load -> authorize -> plan -> commit under the
core's lock. Instructions are returned only after the commit succeeded, and
a failure at any step leaves the stored configuration untouched. Commits
name the version they loaded, so two cores sharing a store cannot lose each
other's updates.

Usage:
    core = TokenFactoryCore.from_config()
    core.instantiate(MessageInfo("juno1creator"), {"allowed_mint_addresses": [], "denoms": []})
    response = core.execute(MessageInfo("juno1creator"), {"add_whitelist": {"addresses": ["juno1m"]}})
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, assert_never

from ..config import get_validated_config, load_config
from ..config_schema import AppConfig
from . import registry
from .admin import plan_transfer_admin
from .authorization import require_manager
from .burn import plan_burn
from .errors import ContractError, InvalidFundsError
from .logger import EventLogger
from .messages import Env, MessageInfo, Response
from .mint import plan_mint
from .msg import (
    AddDenomMsg,
    AddWhitelistMsg,
    BurnMsg,
    ExecuteMsg,
    GetConfigMsg,
    InstantiateMsg,
    MintMsg,
    QueryMsg,
    RemoveDenomMsg,
    RemoveWhitelistMsg,
    TransferAdminMsg,
    parse_execute_msg,
    parse_instantiate_msg,
    parse_query_msg,
)
from .registry import union
from .state import ConfigStore, Configuration, ContractInfo, StoredConfig, create_store
from .validation import validate_address, validate_denoms

logger = logging.getLogger(__name__)


class TokenFactoryCore:
    """Authorization and state-transition core over one configuration record.

    Dependencies:
        store: Where the configuration record lives
        settings: Validated application config (contract policy switches)
        event_logger: Optional JSONL log of every operation
    """

    def __init__(
        self,
        store: ConfigStore | None = None,
        settings: AppConfig | None = None,
        event_logger: EventLogger | None = None,
    ) -> None:
        self.settings = settings or get_validated_config()
        self.store = store if store is not None else create_store(self.settings.storage)
        self.event_logger = event_logger
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config_path: str | Path | None = None) -> TokenFactoryCore:
        """Create a core from a YAML config file (or the default one).

        The store comes from the ``storage`` section and an event logger is
        attached when ``logging.output_file`` is set.
        """
        load_config(config_path)
        settings = get_validated_config()
        event_logger = None
        if settings.logging.output_file:
            event_logger = EventLogger(settings.logging.output_file)
        return cls(settings=settings, event_logger=event_logger)

    @property
    def env(self) -> Env:
        return Env(contract_address=self.settings.contract.address)

    # ===== INSTANTIATE =====

    def instantiate(self, info: MessageInfo, msg: InstantiateMsg | dict[str, Any] | str) -> Response:
        """Create the configuration record.

        Raises:
            InvalidDenomError: If a denom lacks the factory prefix
            InvalidAddressError: If the manager is empty or contains whitespace
            AlreadyInitializedError: If the record already exists
        """
        return self._run("instantiate", info.sender, lambda: self._instantiate(info, msg))

    def _instantiate(self, info: MessageInfo, raw: InstantiateMsg | dict[str, Any] | str) -> Response:
        msg = raw if isinstance(raw, InstantiateMsg) else parse_instantiate_msg(raw)
        contract = self.settings.contract

        validate_denoms(msg.denoms, contract.denom_prefix)
        manager = validate_address(msg.manager if msg.manager is not None else info.sender)

        config = Configuration(
            manager=manager,
            allowed_mint_addresses=union([], msg.allowed_mint_addresses),
            denoms=union([], msg.denoms),
        )
        self.store.save_new(config, ContractInfo(contract.name, contract.version))
        logger.info(
            "Instantiated %s %s with manager %s and %d denoms",
            contract.name,
            contract.version,
            manager,
            len(config.denoms),
        )
        return Response().add_attribute("method", "instantiate")

    # ===== EXECUTE =====

    def execute(
        self,
        info: MessageInfo,
        msg: ExecuteMsg | dict[str, Any] | str,
        env: Env | None = None,
    ) -> Response:
        """Apply one execute message on behalf of ``info.sender``.

        Args:
            info: Authenticated caller and attached funds
            msg: Parsed message, or its ``{"name": {...}}`` wire form
            env: Overrides this core's own account id for the call

        Returns:
            Response with the outbound instructions and attributes

        Raises:
            ContractError: Any failure; nothing is committed in that case
        """
        env = env or self.env
        return self._run("execute", info.sender, lambda: self._execute(info, msg, env))

    def _execute(self, info: MessageInfo, raw: ExecuteMsg | dict[str, Any] | str, env: Env) -> Response:
        msg = parse_execute_msg(raw) if isinstance(raw, (dict, str)) else raw

        if isinstance(msg, BurnMsg):
            return self._execute_burn(info, env)
        elif isinstance(msg, MintMsg):
            return self._execute_mint(info, msg)
        elif isinstance(msg, TransferAdminMsg):
            return self._execute_transfer_admin(info, msg)
        elif isinstance(msg, AddWhitelistMsg):
            return self._update_config(
                info, "add_whitelist", lambda c: registry.add_whitelist(c, msg.addresses)
            )
        elif isinstance(msg, RemoveWhitelistMsg):
            return self._update_config(
                info, "remove_whitelist", lambda c: registry.remove_whitelist(c, msg.addresses)
            )
        elif isinstance(msg, AddDenomMsg):
            return self._update_config(info, "add_denom", lambda c: self._add_denoms(c, msg))
        elif isinstance(msg, RemoveDenomMsg):
            return self._update_config(
                info, "remove_denom", lambda c: registry.remove_denoms(c, msg.denoms)
            )
        else:
            assert_never(msg)

    def _add_denoms(self, config: Configuration, msg: AddDenomMsg) -> Configuration:
        contract = self.settings.contract
        if contract.enforce_denom_prefix_on_add:
            validate_denoms(msg.denoms, contract.denom_prefix)
        return registry.add_denoms(config, msg.denoms)

    def _execute_burn(self, info: MessageInfo, env: Env) -> Response:
        # Anyone can burn, but only what they send in
        if not info.funds:
            raise InvalidFundsError()
        stored = self.store.load()
        plan = plan_burn(stored.config, info.sender, info.funds, env.contract_address)
        logger.info(
            "Burn from %s: %d burned, %d returned",
            info.sender,
            len(plan.burns),
            len(plan.refund.amount),
        )
        return plan.to_response()

    def _execute_mint(self, info: MessageInfo, msg: MintMsg) -> Response:
        stored = self.store.load()
        plan = plan_mint(
            stored.config,
            info.sender,
            msg.address,
            msg.coins(),
            require_managed_denoms=self.settings.contract.require_managed_mint_denoms,
        )
        logger.info("Mint by %s to %s: %d coins", info.sender, plan.recipient, len(plan.coins))
        return plan.to_response()

    def _execute_transfer_admin(self, info: MessageInfo, msg: TransferAdminMsg) -> Response:
        stored = self.store.load()
        plan = plan_transfer_admin(stored.config, info.sender, msg.denom, msg.new_address)
        if plan.updated_config is not None:
            self._commit(stored, plan.updated_config)
        logger.info(
            "Admin of %s transferred to %s (tracked: %s)",
            msg.denom,
            msg.new_address,
            plan.updated_config is not None,
        )
        return plan.to_response()

    def _update_config(
        self,
        info: MessageInfo,
        method: str,
        edit: Callable[[Configuration], Configuration],
    ) -> Response:
        """Manager-only read-modify-write of the configuration."""
        stored = self.store.load()
        require_manager(stored.config, info.sender)
        updated = edit(stored.config)
        if updated != stored.config:
            self._commit(stored, updated)
        logger.info("%s by %s", method, info.sender)
        return Response().add_attribute("method", method)

    def _commit(self, stored: StoredConfig, updated: Configuration) -> None:
        version = self.store.replace(updated, expected_version=stored.version)
        logger.debug("Committed configuration version %d", version)

    # ===== QUERY =====

    def query(self, msg: QueryMsg | dict[str, Any] | str) -> dict[str, Any]:
        """Answer a read-only query; no authorization, no side effects."""
        parsed = parse_query_msg(msg) if isinstance(msg, (dict, str)) else msg
        if isinstance(parsed, GetConfigMsg):
            return self.get_config().to_dict()
        assert_never(parsed)

    def get_config(self) -> Configuration:
        """Snapshot of the current configuration."""
        return self.store.load().config

    def contract_version(self) -> ContractInfo | None:
        """Name and version recorded at instantiation."""
        return self.store.get_contract_info()

    # ===== INTERNALS =====

    def _run(self, operation: str, sender: str, func: Callable[[], Response]) -> Response:
        """Serialize ``func`` and record its outcome in the event log."""
        with self._lock:
            try:
                response = func()
            except ContractError as e:
                logger.debug("%s by %s failed: %s", operation, sender, e)
                if self.event_logger is not None:
                    self.event_logger.log_failure(operation, sender, e)
                raise
        if self.event_logger is not None:
            self.event_logger.log_success(operation, sender, response)
        return response
