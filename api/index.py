# -*- coding: utf-8 -*-
"""
Serverless HTTP entry point

Thin JSON wrappers around the ledger core:
1. POST /api/statements/parse - OFX body -> records and review candidates
2. POST /api/extract          - free text -> extraction result
3. POST /api/projection       - transactions -> balance and daily points
4. GET  /health
"""

import json
import sys
from datetime import date
from pathlib import Path

# Add project root to sys.path for local development
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import logging
from flask import Flask, jsonify, request

from ledger.config import LOG_LEVEL, PROJECTION_HORIZON_DAYS
from ledger.extraction import build_default_resolver
from ledger.parser import parse_statement
from ledger.projection import project_cash_flow
from ledger.services.memory_ledger import InMemoryLedger
from ledger.workflow import ImportReview

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)

# Lazily built on first use (serverless cold start)
_resolver = None


def get_resolver():
    global _resolver
    if _resolver is None:
        logger.info("Initializing extraction resolver")
        _resolver = build_default_resolver()
    return _resolver


def _json_list(raw: str):
    value = json.loads(raw)
    if not isinstance(value, list):
        raise ValueError("expected a JSON list")
    return value


def _bad_request(message: str):
    return jsonify({"error": message}), 400


@app.route("/health", methods=['GET'])
def health():
    return jsonify({"status": "ok"})


@app.route("/api/statements/parse", methods=['POST'])
def parse_statement_endpoint():
    """Parse an OFX body; accounts may be passed as JSON in the ``accounts`` query arg."""
    body = request.get_data(as_text=True)
    records = parse_statement(body)
    review = ImportReview(None, accounts=request.args.get("accounts", type=_json_list) or [])
    review.seed(records)
    return jsonify({
        "records": [r.to_dict() for r in records],
        "candidates": [c.to_dict() for c in review.candidates],
    })


@app.route("/api/extract", methods=['POST'])
def extract():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return _bad_request("JSON object body required")

    result = get_resolver().extract(
        payload.get("text") or "",
        payload.get("categories") or [],
        payload.get("accounts") or [],
        payload.get("contacts") or [],
    )
    return jsonify({"result": result.to_dict() if result else None})


@app.route("/api/projection", methods=['POST'])
def projection():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return _bad_request("JSON object body required")

    try:
        source = InMemoryLedger.from_dicts(payload.get("transactions") or [])
        today = date.fromisoformat(payload["today"]) if payload.get("today") else None
        horizon = int(payload.get("horizon_days", PROJECTION_HORIZON_DAYS))
        result = project_cash_flow(source, today=today, horizon_days=horizon)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Rejected projection request: {e}")
        return _bad_request(str(e))

    return jsonify(result.to_dict())


# Local development entry point
if __name__ == "__main__":
    app.run(debug=True, port=5000)
