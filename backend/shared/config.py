from __future__ import annotations

from typing import Any

from django.conf import settings


def _get_stockline_settings() -> dict[str, Any]:
    return getattr(settings, "STOCKLINE", {}) or {}


def invoice_payment_deducts_stock() -> bool:
    """Whether marking an invoice paid consumes stock for its items."""
    return bool(_get_stockline_settings().get("INVOICE_PAYMENT_DEDUCTS_STOCK", True))


def default_page_size() -> int:
    return int(_get_stockline_settings().get("DEFAULT_PAGE_SIZE", 50))


def max_page_size() -> int:
    return int(_get_stockline_settings().get("MAX_PAGE_SIZE", 500))


def manager_groups() -> set[str]:
    groups = _get_stockline_settings().get("MANAGER_GROUPS") or ["admin", "manager"]
    return {g.lower() for g in groups}
