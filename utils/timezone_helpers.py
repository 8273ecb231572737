from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context

DEFAULT_TZ = "Asia/Karachi"


def app_timezone() -> ZoneInfo:
    """Timezone the billing calendar runs in (``APP_TIMEZONE``)."""
    name: Optional[str] = None
    if has_app_context():
        name = current_app.config.get("APP_TIMEZONE")
    return ZoneInfo(name or DEFAULT_TZ)


def local_now() -> datetime:
    return datetime.now(app_timezone())


def local_today() -> date:
    return local_now().date()
