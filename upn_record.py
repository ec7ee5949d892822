# -*- coding: utf-8 -*-
"""
Платёжные данные UPN: новая схема из 19 полей и устаревшая (legacy) схема.
Приведение любой входной формы к UPNRecord, который читает кодировщик.
"""
import re
from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Union


@dataclass
class UPNRecord:
    """Один платёж в новой схеме UPN QR."""
    payer_name: str
    payer_address: str
    payer_post: str
    receiver_iban: str
    receiver_name: str
    receiver_address: str
    receiver_post: str
    amount: Any             # Decimal / float / str, в евро
    code: str               # koda namena, 4 символа
    purpose: str            # namen plačila, до 42 символов
    payment_date: str = ""  # DD.MM.YYYY
    payer_iban: str = ""
    payer_reference: str = ""
    is_deposit: bool = False
    is_withdrawal: bool = False
    is_urgent: bool = False
    receiver_reference: str = ""
    payment_deadline: str = ""  # DD.MM.YYYY


@dataclass
class LegacyUPNRecord:
    """Устаревшая минимальная схема (dueDate YYYYMMDD, плоское поле reference)."""
    payer_name: str
    payer_address: str
    payer_post: str
    receiver_name: str
    receiver_address: str
    receiver_post: str
    receiver_iban: str
    amount: Any
    code: str
    reference: str
    purpose: str
    due_date: str  # YYYYMMDD


PaymentRecord = Union[UPNRecord, LegacyUPNRecord, Mapping[str, Any]]

_UPN_FIELDS = tuple(f.name for f in fields(UPNRecord))
_FLAG_FIELDS = ("is_deposit", "is_withdrawal", "is_urgent")


def convert_legacy_date(due_date: Optional[str]) -> str:
    """YYYYMMDD -> DD.MM.YYYY. Anything else, including non-strings, becomes an empty date."""
    if not isinstance(due_date, str) or len(due_date) != 8:
        return ""
    return f"{due_date[6:8]}.{due_date[4:6]}.{due_date[0:4]}"


def resolve_payment_date(payment_date: Optional[str], due_date: Optional[str] = None) -> str:
    return payment_date or convert_legacy_date(due_date)


def resolve_receiver_reference(receiver_reference: Optional[str], reference: Optional[str] = None) -> str:
    return receiver_reference or reference or ""


def from_legacy(legacy: LegacyUPNRecord) -> UPNRecord:
    """
    Total up-conversion of a legacy record. Fields the legacy layout does not
    carry get their empty defaults.
    """
    return UPNRecord(
        payer_iban="",
        payer_name=legacy.payer_name,
        payer_address=legacy.payer_address,
        payer_post=legacy.payer_post,
        payer_reference="",
        is_deposit=False,
        is_withdrawal=False,
        is_urgent=False,
        receiver_iban=legacy.receiver_iban,
        receiver_name=legacy.receiver_name,
        receiver_address=legacy.receiver_address,
        receiver_post=legacy.receiver_post,
        receiver_reference=resolve_receiver_reference(None, legacy.reference),
        amount=legacy.amount,
        code=legacy.code,
        purpose=legacy.purpose,
        payment_date=convert_legacy_date(legacy.due_date),
        payment_deadline="",
    )


def _snake_case(key: str) -> str:
    # payerIban -> payer_iban, dueDate -> due_date
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def from_mapping(data: Mapping[str, Any]) -> UPNRecord:
    """
    Builds a UPNRecord from a dict (parsed JSON etc.) in either layout.
    Keys may be snake_case or camelCase; unknown keys are ignored.
    New-layout values win over legacy ones.
    """
    values: Dict[str, Any] = {_snake_case(str(k)): v for k, v in data.items()}

    kwargs: Dict[str, Any] = {}
    for name in _UPN_FIELDS:
        value = values.get(name)
        if name in _FLAG_FIELDS:
            kwargs[name] = bool(value)
        elif name == "amount":
            kwargs[name] = 0 if value is None else value
        else:
            kwargs[name] = "" if value is None else value

    kwargs["payment_date"] = resolve_payment_date(kwargs["payment_date"], values.get("due_date"))
    kwargs["receiver_reference"] = resolve_receiver_reference(
        kwargs["receiver_reference"], values.get("reference")
    )
    return UPNRecord(**kwargs)


def to_upn_record(record: PaymentRecord) -> UPNRecord:
    """Normalizes any accepted input shape into the new layout."""
    if isinstance(record, UPNRecord):
        return record
    if isinstance(record, LegacyUPNRecord):
        return from_legacy(record)
    if isinstance(record, Mapping):
        return from_mapping(record)
    raise TypeError(f"Unsupported payment record type: {type(record).__name__}")


def format_display_amount(amount: Any) -> str:
    """Amount as printed on the form: ***1268.74"""
    try:
        value = Decimal(str(amount)).quantize(Decimal("0.01"))
    except InvalidOperation:
        return "***" + str(amount)
    return f"***{value}"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def display_fields(record: PaymentRecord) -> Dict[str, str]:
    """
    Unpadded values for the printed form. Reference is split into the model
    (first 4 chars, e.g. SI99 / RF12) and the rest, as the form has two boxes.
    """
    r = to_upn_record(record)
    reference = _text(r.receiver_reference)
    return {
        "payer_name": _text(r.payer_name),
        "payer_address": _text(r.payer_address),
        "payer_post": _text(r.payer_post),
        "receiver_name": _text(r.receiver_name),
        "receiver_address": _text(r.receiver_address),
        "receiver_post": _text(r.receiver_post),
        "receiver_iban": _text(r.receiver_iban),
        "receiver_reference": reference,
        "reference_prefix": reference[:4],
        "reference_suffix": reference[4:],
        "purpose": _text(r.purpose),
        "code": _text(r.code),
        "amount": format_display_amount(r.amount),
        "payment_date": _text(r.payment_date),
    }
