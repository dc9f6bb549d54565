from __future__ import annotations

from datetime import date, datetime
from typing import Any

from finance_categorizer.models import Transaction, new_transaction_id


def parse_date(value: str | date | datetime | None) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
        # dd/mm/yyyy is the usual format in local bank exports
        try:
            return datetime.strptime(text, "%d/%m/%Y").date()
        except ValueError:
            pass
    raise ValueError(f"Unrecognized transaction date: {value!r}")


def parse_amount(value: Any) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value or "").strip().replace("R$", "").replace(" ", "")
    if not text:
        return 0.0
    if "," in text and text.rfind(",") > text.rfind("."):
        # 1.234,56 -> 1234.56
        text = text.replace(".", "").replace(",", ".")
    else:
        text = text.replace(",", "")
    return float(text)


def build_transaction(row: dict[str, Any]) -> Transaction:
    """
    Build a Transaction from a row already resolved by the import step:
    ``date``, ``description``, ``amount`` and optionally ``raw_category``
    and ``account``.
    """
    return Transaction(
        id=str(row.get("id") or new_transaction_id()),
        date=parse_date(row.get("date")),
        description=str(row.get("description") or ""),
        amount=parse_amount(row.get("amount")),
        category=str(row.get("raw_category") or row.get("category") or ""),
        account=str(row.get("account") or ""),
        is_manual=False,
    )
