# -*- coding: utf-8 -*-
"""
Формирование содержимого UPN QR (19 полей фиксированной ширины + контрольная сумма)
и PNG-изображения QR-кода.
Спецификация: upn-qr.si, NavodilaZaProgramerjeUPNQR.
"""
import io
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, List

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M

from upn_record import PaymentRecord, to_upn_record

logger = logging.getLogger(__name__)

LEADING_STRING = "UPNQR"

# Банковские приложения откалиброваны под: ECC M, версия 15 (до 411 знаков), ISO-8859-2
QR_VERSION = 15
QR_BORDER = 1
QR_SIZE = 250
PAYLOAD_ENCODING = "iso-8859-2"

AMOUNT_WIDTH = 11
CHECKSUM_WIDTH = 3


def format_field(value: Any, width: int) -> str:
    """Right-pads with spaces. Values already at or over width are returned as is."""
    text = "" if value is None else str(value)
    return text.ljust(width, " ")


def format_verbatim(value: Any) -> str:
    """Dates go in unpadded; None is empty."""
    return "" if value is None else str(value)


def format_flag(value: Any) -> str:
    return "X" if value else ""


def format_amount(amount: Any) -> str:
    """
    Сумма в центах, 11 знаков с ведущими нулями: 1268.74 -> 00000126874.
    Не валидирует: нечисловая сумма даёт NaN, отрицательная сохраняет знак внутри поля.
    """
    try:
        cents = (Decimal(str(amount)) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        cents = Decimal("NaN")
    if cents.is_zero():
        cents = Decimal(0)  # -0 after rounding
    text = str(cents) if cents.is_finite() else "NaN"
    return text.rjust(AMOUNT_WIDTH, "0")


def build_upn_fields(record: PaymentRecord) -> List[str]:
    """Returns the 19 UPN QR fields in their fixed order."""
    r = to_upn_record(record)
    return [
        LEADING_STRING,                         # 1. vodilni slog
        format_field(r.payer_iban, 19),         # 2. IBAN plačnika
        format_flag(r.is_deposit),              # 3. polog
        format_flag(r.is_withdrawal),           # 4. dvig
        format_field(r.payer_reference, 26),    # 5. referenca plačnika
        format_field(r.payer_name, 33),         # 6. ime plačnika
        format_field(r.payer_address, 33),      # 7. ulica plačnika
        format_field(r.payer_post, 33),         # 8. kraj plačnika
        format_amount(r.amount),                # 9. znesek
        format_verbatim(r.payment_date),        # 10. datum plačila
        format_flag(r.is_urgent),               # 11. nujno
        format_field(r.code, 4),                # 12. koda namena
        format_field(r.purpose, 42),            # 13. namen plačila
        format_verbatim(r.payment_deadline),    # 14. rok plačila
        format_field(r.receiver_iban, 34),      # 15. IBAN prejemnika
        format_field(r.receiver_reference, 26), # 16. referenca prejemnika
        format_field(r.receiver_name, 33),      # 17. ime prejemnika
        format_field(r.receiver_address, 33),   # 18. ulica prejemnika
        format_field(r.receiver_post, 33),      # 19. kraj prejemnika
    ]


def checksum_field(body: str) -> str:
    """20. kontrolna vsota: length of fields 1-19 with separators, 3 digits."""
    return str(len(body)).zfill(CHECKSUM_WIDTH)


def encode_record(record: PaymentRecord) -> str:
    """
    Собирает строку для QR-кода UPN. Разделитель LF, после контрольной суммы тоже LF.
    Accepts UPNRecord, LegacyUPNRecord or a mapping in either layout.
    """
    body = "\n".join(build_upn_fields(record)) + "\n"
    return body + checksum_field(body) + "\n"


def payload_to_qr_image(payload: str, size: int = QR_SIZE) -> bytes:
    """
    Генерирует PNG-изображение QR-кода. Возвращает bytes (PNG).
    Payload goes in as ISO-8859-2 bytes so qrcode does not emit UTF-8.
    """
    data = payload.encode(PAYLOAD_ENCODING)
    qr = qrcode.QRCode(
        version=QR_VERSION,
        error_correction=ERROR_CORRECT_M,
        box_size=1,
        border=QR_BORDER,
    )
    qr.add_data(data, optimize=0)
    qr.make(fit=False)
    modules = qr.modules_count + 2 * QR_BORDER
    qr.box_size = max(1, size // modules)
    img = qr.make_image(fill_color="black", back_color="white").get_image()
    if img.size != (size, size):
        img = img.resize((size, size), Image.Resampling.NEAREST)
    logger.debug("QR image: %d bytes payload, %dx%d px", len(data), size, size)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_qr(record: PaymentRecord, size: int = QR_SIZE) -> bytes:
    return payload_to_qr_image(encode_record(record), size=size)
