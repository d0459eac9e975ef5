# -*- coding: utf-8 -*-
"""Ledger command line.

Subcommands print one JSON document on stdout:

- import:  parse an OFX statement into review candidates
- extract: run free text through the extraction chain
- project: cash-flow projection from a JSON ledger file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any

from ledger.config import LOG_LEVEL, PROJECTION_HORIZON_DAYS
from ledger.extraction import build_default_resolver
from ledger.parser import parse_statement_file
from ledger.projection import project_cash_flow
from ledger.services.memory_ledger import InMemoryLedger
from ledger.workflow import ImportReview

logger = logging.getLogger(__name__)


def _print_json(payload: dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False))
    sys.stdout.write("\n")


def _load_json(path: str | None, default: Any) -> Any:
    if not path:
        return default
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def cmd_import(args: argparse.Namespace) -> int:
    categories = _load_json(args.categories, [])
    accounts = _load_json(args.accounts, [])
    resolver = None if args.no_llm else build_default_resolver()

    review = ImportReview(resolver, categories, accounts)
    review.seed(parse_statement_file(args.file))
    refined = 0 if resolver is None else review.classify_all()

    _print_json(
        {
            "status": "ok",
            "result": {
                "count": len(review),
                "refined": refined,
                "candidates": [c.to_dict() for c in review.candidates],
            },
        }
    )
    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    resolver = build_default_resolver()
    result = resolver.extract(
        args.text,
        _load_json(args.categories, []),
        _load_json(args.accounts, []),
        _load_json(args.contacts, []),
    )
    if result is None:
        _print_json({"status": "empty", "result": None})
        return 1
    _print_json({"status": "ok", "result": result.to_dict()})
    return 0


def cmd_project(args: argparse.Namespace) -> int:
    try:
        rows = _load_json(args.ledger, [])
        today = date.fromisoformat(args.today) if args.today else None
        source = InMemoryLedger.from_dicts(rows)
    except (KeyError, TypeError, ValueError) as e:
        _print_json({"status": "error", "error": {"message": f"invalid ledger: {e}", "reason": "bad_input"}})
        return 1

    projection = project_cash_flow(source, today=today, horizon_days=args.horizon)
    _print_json({"status": "ok", "result": projection.to_dict()})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ledger", description="Statement import and cash-flow tools")
    parser.add_argument("--log-level", default=LOG_LEVEL)
    sub = parser.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Parse an OFX statement into review candidates")
    imp.add_argument("file", type=Path)
    imp.add_argument("--categories", help="JSON file with [{id, name}]")
    imp.add_argument("--accounts", help="JSON file with [{id, name}]")
    imp.add_argument("--no-llm", action="store_true", help="Skip AI refinement")
    imp.set_defaults(func=cmd_import)

    ext = sub.add_parser("extract", help="Extract a transaction from free text")
    ext.add_argument("text")
    ext.add_argument("--categories")
    ext.add_argument("--accounts")
    ext.add_argument("--contacts")
    ext.set_defaults(func=cmd_extract)

    proj = sub.add_parser("project", help="Project the cash flow of a JSON ledger")
    proj.add_argument("ledger", help="JSON file with a list of transactions")
    proj.add_argument("--today", help="YYYY-MM-DD (default: today)")
    proj.add_argument("--horizon", type=int, default=PROJECTION_HORIZON_DAYS)
    proj.set_defaults(func=cmd_project)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
