# -*- coding: utf-8 -*-
"""
Парсинг содержимого UPN QR кода (строка, полученная из encode_record или при декодировании QR).
Формат: 19 строк, разделённых \\n, затем 3-значная контрольная сумма и \\n.
"""
import re
from decimal import Decimal
from typing import Optional

from upn_qr import CHECKSUM_WIDTH, LEADING_STRING
from upn_record import UPNRecord

FIELD_COUNT = 19


def _split_body(qr_string: str):
    """Returns (body, checksum) where body keeps its trailing LF; checksum may be None."""
    lines = qr_string.split("\n")
    if lines and lines[-1] == "":
        lines = lines[:-1]
    if len(lines) > FIELD_COUNT and re.fullmatch(r"\d{%d}" % CHECKSUM_WIDTH, lines[-1]):
        return "\n".join(lines[:-1]) + "\n", lines[-1]
    return "\n".join(lines) + "\n", None


def verify_checksum(qr_string: str) -> bool:
    """True if the trailing field equals the length of fields 1-19 with separators."""
    if not qr_string:
        return False
    body, checksum = _split_body(qr_string)
    return checksum is not None and int(checksum) == len(body)


def _parse_upn_amount(znesek_11: str) -> Optional[Decimal]:
    """Парсит сумму из 11 цифр (последние 2: центы)."""
    s = (znesek_11 or "").strip()
    if not re.fullmatch(r"\d{11}", s):
        return None
    return Decimal(int(s)) / 100


def parse_upn_payload(qr_string: str) -> Optional[UPNRecord]:
    """
    Парсит одну строку UPN QR. Возвращает UPNRecord или None,
    если строка не является валидным UPNQR. Padding is stripped.
    """
    if not qr_string or not qr_string.strip():
        return None
    body, _ = _split_body(qr_string)
    lines = body.split("\n")[:-1]
    if len(lines) != FIELD_COUNT or lines[0] != LEADING_STRING:
        return None

    amount = _parse_upn_amount(lines[8])
    if amount is None:
        return None

    f = [ln.strip() for ln in lines]
    return UPNRecord(
        payer_iban=f[1],
        is_deposit=f[2] == "X",
        is_withdrawal=f[3] == "X",
        payer_reference=f[4],
        payer_name=f[5],
        payer_address=f[6],
        payer_post=f[7],
        amount=amount,
        payment_date=f[9],
        is_urgent=f[10] == "X",
        code=f[11],
        purpose=f[12],
        payment_deadline=f[13],
        receiver_iban=f[14],
        receiver_reference=f[15],
        receiver_name=f[16],
        receiver_address=f[17],
        receiver_post=f[18],
    )
