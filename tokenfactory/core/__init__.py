# Token factory core package
from .contract import TokenFactoryCore
from .errors import (
    ContractError, ErrorCategory, ErrorCode,
    InvalidDenomError, UnauthorizedError, InvalidFundsError, InvalidAddressError,
    InvalidMessageError, PersistenceError, NotInitializedError,
    AlreadyInitializedError, ConcurrentModificationError,
)
from .messages import (
    Coin, Env, MessageInfo, Response,
    MintInstruction, BurnInstruction, ChangeAdminInstruction, TransferInstruction,
    format_coins, parse_coins,
)
from .msg import (
    InstantiateMsg, ExecuteMsg, QueryMsg,
    BurnMsg, MintMsg, TransferAdminMsg, AddWhitelistMsg, RemoveWhitelistMsg,
    AddDenomMsg, RemoveDenomMsg, GetConfigMsg,
    parse_instantiate_msg, parse_execute_msg, parse_query_msg,
)
from .state import (
    Configuration, ContractInfo, StoredConfig, ConfigStore,
    MemoryConfigStore, SqliteConfigStore, create_store,
)
from .logger import EventLogger

__all__ = [
    "TokenFactoryCore",
    "ContractError", "ErrorCategory", "ErrorCode",
    "InvalidDenomError", "UnauthorizedError", "InvalidFundsError", "InvalidAddressError",
    "InvalidMessageError", "PersistenceError", "NotInitializedError",
    "AlreadyInitializedError", "ConcurrentModificationError",
    "Coin", "Env", "MessageInfo", "Response",
    "MintInstruction", "BurnInstruction", "ChangeAdminInstruction", "TransferInstruction",
    "format_coins", "parse_coins",
    "InstantiateMsg", "ExecuteMsg", "QueryMsg",
    "BurnMsg", "MintMsg", "TransferAdminMsg", "AddWhitelistMsg", "RemoveWhitelistMsg",
    "AddDenomMsg", "RemoveDenomMsg", "GetConfigMsg",
    "parse_instantiate_msg", "parse_execute_msg", "parse_query_msg",
    "Configuration", "ContractInfo", "StoredConfig", "ConfigStore",
    "MemoryConfigStore", "SqliteConfigStore", "create_store",
    "EventLogger",
]
