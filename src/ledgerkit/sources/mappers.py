"""Mapper functions to convert between plain documents and domain entities.

This layer isolates the conversion logic, so the engines keep working on
typed records whatever shape the storage or sync layer hands over.
"""

from typing import Any, Optional

from ledgerkit.domain import entities as domain
from ledgerkit.domain.errors import ValidationError
from ledgerkit.utils.date_parser import parse_date


def _require(data: dict[str, Any], key: str, kind: str) -> Any:
    if key not in data or data[key] is None:
        raise ValidationError(f"{kind} is missing required field '{key}'")
    return data[key]


def _optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Field '{field_name}' must be an integer, got {value!r}")


def _optional_float(value: Any, field_name: str) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Field '{field_name}' must be a number, got {value!r}")


def account_from_dict(data: dict[str, Any]) -> domain.Account:
    """Convert an account document to a domain Account entity.

    Amounts are given as a list of ``{"currency": ..., "amount": ...}``.
    """
    amounts = tuple(
        domain.AccountAmount(
            currency=item.get("currency") or "",
            amount=_optional_float(_require(item, "amount", "Account amount"), "amount"),
        )
        for item in data.get("amounts", [])
    )
    return domain.Account(
        id=_optional_int(_require(data, "id", "Account"), "id"),
        name=_require(data, "name", "Account"),
        amounts=amounts,
    )


def transaction_line_from_dict(data: dict[str, Any]) -> domain.TransactionLine:
    """Convert a transaction line document to a domain TransactionLine."""
    return domain.TransactionLine(
        account_name=_require(data, "account_name", "Transaction line"),
        amount=_optional_float(data.get("amount"), "amount"),
        currency=data.get("currency") or "",
        comment=data.get("comment"),
    )


def transaction_from_dict(data: dict[str, Any]) -> domain.Transaction:
    """Convert a transaction document to a domain Transaction entity."""
    raw_date = _require(data, "date", "Transaction")
    try:
        txn_date = parse_date(str(raw_date))
    except ValueError as e:
        raise ValidationError(str(e))

    return domain.Transaction(
        ledger_id=_optional_int(_require(data, "ledger_id", "Transaction"), "ledger_id"),
        date=txn_date,
        description=data.get("description") or "",
        comment=data.get("comment"),
        lines=tuple(transaction_line_from_dict(line) for line in data.get("lines", [])),
        id=_optional_int(data.get("id"), "id"),
    )


def template_line_from_dict(data: dict[str, Any]) -> domain.TemplateLine:
    """Convert a template line document to a domain TemplateLine."""
    return domain.TemplateLine(
        account_name=data.get("account_name"),
        account_name_group=_optional_int(data.get("account_name_group"), "account_name_group"),
        currency=data.get("currency"),
        currency_group=_optional_int(data.get("currency_group"), "currency_group"),
        amount=_optional_float(data.get("amount"), "amount"),
        amount_group=_optional_int(data.get("amount_group"), "amount_group"),
        negate_amount=bool(data.get("negate_amount", False)),
        comment=data.get("comment"),
        comment_group=_optional_int(data.get("comment_group"), "comment_group"),
    )


def template_from_dict(data: dict[str, Any]) -> domain.Template:
    """Convert a template document to a domain Template entity."""
    int_fields = (
        "description_group",
        "comment_group",
        "date_year",
        "date_year_group",
        "date_month",
        "date_month_group",
        "date_day",
        "date_day_group",
    )
    version = _optional_int(data.get("version"), "version")
    return domain.Template(
        name=_require(data, "name", "Template"),
        pattern=data.get("pattern") or "",
        id=_optional_int(data.get("id"), "id"),
        version=1 if version is None else version,
        is_fallback=bool(data.get("is_fallback", False)),
        test_text=data.get("test_text"),
        description=data.get("description"),
        comment=data.get("comment"),
        lines=tuple(template_line_from_dict(line) for line in data.get("lines", [])),
        **{name: _optional_int(data.get(name), name) for name in int_fields},
    )


def draft_to_dict(draft: domain.TransactionDraft) -> dict[str, Any]:
    """Convert a transaction draft to a plain serialisable document."""
    return {
        "description": draft.description,
        "comment": draft.comment,
        "date": draft.date.isoformat(),
        "template_name": draft.template_name,
        "lines": [
            {
                "account_name": line.account_name,
                "amount": line.amount,
                "currency": line.currency,
                "comment": line.comment,
            }
            for line in draft.lines
        ],
    }
