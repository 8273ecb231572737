from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar, Any, cast
from flask import session, jsonify

F = TypeVar("F", bound=Callable[..., Any])


def admin_required(func: F) -> F:
    """Decorator that requires an admin session.

    - If ``session['admin_user_id']`` is set, proceeds to the view.
    - Otherwise, answers with a 401 JSON error envelope.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        if not session.get("admin_user_id"):
            return jsonify({"success": False, "error": "Not authorized"}), 401
        return func(*args, **kwargs)

    return cast(F, wrapper)
