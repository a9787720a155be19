"""Formatting helpers shared by the message templates.

Messages are sent with HTML parse mode: ``bold`` and ``code`` produce the
only markup used, and every interpolated value goes through ``escape``.
"""

import html
from decimal import Decimal

STATUS_LABELS = {
    "pending": "Pending",
    "confirmed": "Order confirmed",
    "preparing": "Order is being prepared",
    "out-for-delivery": "Order is out for delivery",
    "delivered": "Order delivered",
    "cancelled": "Order cancelled",
}

PAYMENT_METHOD_LABELS = {
    "cash": "Cash on delivery",
    "card": "Card",
    "online": "Online payment",
}

NOT_PROVIDED = "Not provided"


def escape(value) -> str:
    return html.escape(str(value), quote=False)


def bold(value) -> str:
    return f"<b>{escape(value)}</b>"


def code(value) -> str:
    return f"<code>{escape(value)}</code>"


def format_price(amount, currency_label: str = "LYD") -> str:
    """Two-decimal display form of a money amount."""
    return f"{Decimal(str(amount)):.2f} {currency_label}"


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def payment_method_label(method: str) -> str:
    return PAYMENT_METHOD_LABELS.get(method, method)


def join_lines(*lines: str | None) -> str:
    """Join message lines, dropping optional lines that rendered as ``None``."""
    return "\n".join(line for line in lines if line is not None).strip()
