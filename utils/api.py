from __future__ import annotations

from typing import Any, Optional, Tuple

from flask import jsonify, request

from utils.errors import ValidationError
from utils.fee_status import FeeStatusEngine
from utils.ledger import FeeLedger
from utils.roster import Roster
from utils.timezone_helpers import local_today


def ok(data: Any = None, status: int = 200, count: Optional[int] = None):
    body = {"success": True, "data": data}
    if count is not None:
        body["count"] = count
    return jsonify(body), status


def fail(error: str, status: int = 400):
    return jsonify({"success": False, "error": error}), status


def get_engine() -> FeeStatusEngine:
    return FeeStatusEngine(Roster(), FeeLedger(), today=local_today)


def int_arg(name: str) -> Optional[int]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a whole number")


def period_args() -> Tuple[int, int]:
    """``?month=&year=`` query values, defaulting to the current period."""
    today = local_today()
    month = int_arg("month")
    year = int_arg("year")
    return (month if month is not None else today.month, year if year is not None else today.year)
