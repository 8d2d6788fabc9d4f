from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    total_discount: Decimal
    total_tax: Decimal
    total_amount: Decimal

    def as_fields(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "total_discount": self.total_discount,
            "total_tax": self.total_tax,
            "total_amount": self.total_amount,
        }


def line_total(quantity: int, unit_price, discount=ZERO, tax=ZERO) -> Decimal:
    """``quantity x unit_price - discount + tax``"""
    return Decimal(quantity) * Decimal(unit_price) - Decimal(discount or 0) + Decimal(tax or 0)


def summarise(lines: Iterable[Mapping]) -> DocumentTotals:
    """Header totals for order or invoice lines given as dicts with quantity/unit_price/discount/tax."""
    subtotal = total_discount = total_tax = ZERO
    for line in lines:
        subtotal += Decimal(line["quantity"]) * Decimal(line["unit_price"])
        total_discount += Decimal(line.get("discount") or 0)
        total_tax += Decimal(line.get("tax") or 0)
    return DocumentTotals(
        subtotal=subtotal,
        total_discount=total_discount,
        total_tax=total_tax,
        total_amount=subtotal - total_discount + total_tax,
    )
