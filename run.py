#!/usr/bin/env python3
"""
Token factory core - command line runner

Usage:
    python run.py --db tokenfactory.db instantiate --sender juno1creator --msg '{"allowed_mint_addresses": [], "denoms": ["factory/juno1c/test"]}'
    python run.py --db tokenfactory.db execute --sender juno1creator --msg '{"add_whitelist": {"addresses": ["juno1m"]}}'
    python run.py --db tokenfactory.db execute --sender juno1s --funds 50factory/juno1c/test,10uatom --msg '{"burn": {}}'
    python run.py --db tokenfactory.db query --msg '{"get_config": {}}'
    python run.py schema

State lives in the store named by config/config.yaml. The default memory
store lasts one invocation; --db keeps it in a SQLite file that successive
invocations share.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from tokenfactory.config import get_validated_config, load_config, set_config_value
from tokenfactory.core import ContractError, EventLogger, MessageInfo, TokenFactoryCore, parse_coins
from tokenfactory.core.msg import message_schemas
from tokenfactory.core.state import Configuration


def build_core(args: argparse.Namespace) -> TokenFactoryCore:
    """Load config, apply CLI overrides, and build the core."""
    load_config(args.config)
    if args.db:
        set_config_value("storage.backend", "sqlite")
        set_config_value("storage.path", args.db)
    if args.events:
        set_config_value("logging.output_file", args.events)

    settings = get_validated_config()
    logging.basicConfig(
        level=logging.WARNING if args.quiet else settings.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    event_logger = None
    if settings.logging.output_file:
        event_logger = EventLogger(settings.logging.output_file)
    return TokenFactoryCore(settings=settings, event_logger=event_logger)


def run_command(args: argparse.Namespace) -> dict[str, Any]:
    """Execute one CLI command and return its JSON-able result."""
    if args.command == "schema":
        schemas = message_schemas()
        schemas["config"] = _config_schema()
        return schemas

    core = build_core(args)
    if args.command == "instantiate":
        return core.instantiate(MessageInfo(args.sender), args.msg).to_dict()
    if args.command == "execute":
        funds = parse_coins(args.funds) if args.funds else []
        return core.execute(MessageInfo(args.sender, funds), args.msg).to_dict()
    if args.command == "query":
        return core.query(args.msg)
    raise ValueError(f"Unknown command: {args.command}")


def _config_schema() -> dict[str, Any]:
    """JSON schema of the GetConfig response."""
    return {
        "title": Configuration.__name__,
        "type": "object",
        "required": ["manager", "allowed_mint_addresses", "denoms"],
        "properties": {
            "manager": {"type": "string"},
            "allowed_mint_addresses": {"type": "array", "items": {"type": "string"}},
            "denoms": {"type": "array", "items": {"type": "string"}},
        },
        "additionalProperties": False,
    }


def make_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Run token factory core operations"
    )
    parser.add_argument(
        "--config", default=None, help="Path to config file (default: config/config.yaml)"
    )
    parser.add_argument("--db", default=None, help="SQLite file holding the configuration record")
    parser.add_argument("--events", default=None, help="JSONL event log file")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")

    sub = parser.add_subparsers(dest="command", required=True)

    inst = sub.add_parser("instantiate", help="Create the configuration record")
    inst.add_argument("--sender", required=True, help="Initializing caller")
    inst.add_argument("--msg", required=True, help="InstantiateMsg as JSON")

    exe = sub.add_parser("execute", help="Run an execute message")
    exe.add_argument("--sender", required=True, help="Calling principal")
    exe.add_argument("--funds", default="", help="Attached funds, e.g. 10uatom,5factory/x/y")
    exe.add_argument("--msg", required=True, help="ExecuteMsg as JSON, e.g. '{\"burn\": {}}'")

    qry = sub.add_parser("query", help="Run a query message")
    qry.add_argument("--msg", default='{"get_config": {}}', help="QueryMsg as JSON")

    sub.add_parser("schema", help="Print message JSON schemas")
    return parser


def main(argv: list[str] | None = None) -> int:
    args: argparse.Namespace = make_parser().parse_args(argv)
    try:
        result = run_command(args)
    except ContractError as e:
        print(json.dumps(e.to_response(), indent=2), file=sys.stderr)
        return 1
    except ValueError as e:
        print(json.dumps({"success": False, "error": str(e)}, indent=2), file=sys.stderr)
        return 2
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
