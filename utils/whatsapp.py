from __future__ import annotations

from typing import Any, Dict, Iterable, Optional
from urllib.parse import quote

from utils.periods import DEFAULT_DUE_DAY, month_name

WA_ME_BASE = "https://wa.me"
GROUP_HOST = "chat.whatsapp.com/"
GROUP_BASE = "https://chat.whatsapp.com"

# Same unreserved set as JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def _digits_only(number: str) -> str:
    return "".join(ch for ch in str(number) if ch.isdigit())


def _encode(message: str) -> str:
    return quote(message, safe=_URI_COMPONENT_SAFE)


def format_amount(amount: Any) -> str:
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


def format_phone_number(phone: Optional[str]) -> Optional[str]:
    if not phone:
        return None
    value = str(phone).strip()
    if value.startswith("whatsapp:"):
        value = value[len("whatsapp:"):]
    return _digits_only(value.lstrip("+")) or None


def generate_whatsapp_link(phone: Optional[str], message: str) -> Optional[str]:
    digits = format_phone_number(phone)
    if not digits:
        return None
    return f"{WA_ME_BASE}/{digits}?text={_encode(message)}"


def extract_invite_code(group_invite: Optional[str]) -> Optional[str]:
    if not group_invite:
        return None
    code = str(group_invite).strip()
    if GROUP_HOST in code:
        code = code.split(GROUP_HOST, 1)[1].split("?", 1)[0]
    return code or None


def generate_group_link(group_invite: Optional[str], message: str) -> Optional[str]:
    code = extract_invite_code(group_invite)
    if not code:
        return None
    return f"{GROUP_BASE}/{code}?text={_encode(message)}"


# --------------------------
# Message templates
# --------------------------

def fee_reminder_message(student_name: str, month: int, year: int, amount: Any) -> str:
    return (
        f"Assalamu Alaikum {student_name},\n\n"
        f"This is a reminder that your Madarsa fee for {month_name(month)} {year} is pending.\n"
        f"Amount: PKR{format_amount(amount)}\n"
        "Please make the payment at your earliest convenience.\n\n"
        "JazakAllah Khair"
    )


def payment_confirmation_message(student_name: str, amount: Any, month: int, year: int) -> str:
    return (
        f"Assalamu Alaikum {student_name},\n\n"
        "Your Madarsa fee payment has been confirmed.\n"
        f"Amount: PKR{format_amount(amount)}\n"
        f"Month: {month_name(month)} {year}\n"
        "Thank you for your payment.\n\n"
        "JazakAllah Khair"
    )


ANNOUNCEMENT_HEADINGS = {
    "holiday": "*Holiday Announcement*",
    "timing_change": "*Timing Change Announcement*",
}


def announcement_message(kind: str, message: str) -> str:
    heading = ANNOUNCEMENT_HEADINGS.get(kind, "*Announcement*")
    return f"{heading}\n\n{message}"


def group_reminder_message(reminders: Iterable[Dict[str, Any]], month: int, year: int) -> str:
    lines = [
        f"*Fee Reminder - {month_name(month)} {year}*\n\n",
        "Assalamu Alaikum,\n\n",
        "This is a reminder for the following students with pending fees:\n\n",
    ]
    for index, reminder in enumerate(reminders, start=1):
        due_day = reminder.get("feeDueDate") or DEFAULT_DUE_DAY
        lines.append(f"{index}. {reminder['studentName']}\n")
        lines.append(f"   Amount: PKR{format_amount(reminder['amount'])}\n")
        lines.append(f"   Due Date: {due_day}th\n\n")
    lines.append("Please make the payment at your earliest convenience.\n\n")
    lines.append("JazakAllah Khair")
    return "".join(lines)
