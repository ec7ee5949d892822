# -*- coding: utf-8 -*-
"""
Формирование PDF для печати: реестр платежей и заполненные бланки UPN с QR-кодами.
"""
import io
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, List, Optional, Union

from PIL import Image as PILImage
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    Image,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from upn_form import FormRenderer
from upn_record import PaymentRecord, UPNRecord, to_upn_record

logger = logging.getLogger(__name__)

FORM_WIDTH = 180 * mm


def _ascii_slovenian(s: str) -> str:
    """Replace Slovenian diacritics for PDF display: c, s, z -> c, s, z."""
    if not s:
        return s
    return (
        s.replace("č", "c").replace("Č", "C")  # c, C
        .replace("š", "s").replace("Š", "S")  # s, S
        .replace("ž", "z").replace("Ž", "Z")  # z, Z
    )


def _amount(r: UPNRecord) -> Decimal:
    """Amount as Decimal; non-numeric or non-finite amounts raise ValueError."""
    try:
        value = Decimal(str(r.amount))
    except InvalidOperation:
        value = Decimal("NaN")
    if not value.is_finite():
        raise ValueError(f"Invalid amount {r.amount!r} for {r.receiver_name or 'Recipient'}")
    return value


def _register_table(records: List[UPNRecord]) -> Table:
    total = sum((_amount(r) for r in records), Decimal("0"))
    table_data = [
        ["#", "Recipient", "Reference", "Amount (EUR)"],
    ]
    for idx, r in enumerate(records, 1):
        rec = _ascii_slovenian(r.receiver_name or "")
        table_data.append([
            str(idx),
            (rec[:40] + "..." if len(rec) > 40 else rec),
            r.receiver_reference,
            f"{_amount(r):.2f}",
        ])
    table_data.append(["", "", "TOTAL", f"{total:.2f}"])

    t = Table(table_data, colWidths=[12 * mm, 85 * mm, 50 * mm, 30 * mm])
    t.setStyle(
        TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4472C4")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("ALIGN", (0, 0), (-1, -1), "LEFT"),
            ("ALIGN", (3, 0), (3, -1), "RIGHT"),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, 0), 10),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
            ("BACKGROUND", (0, -1), (-1, -1), colors.HexColor("#E2EFDA")),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("FONTSIZE", (0, 1), (-1, -1), 9),
        ])
    )
    return t


def _form_flowable(renderer: FormRenderer, record: UPNRecord) -> Image:
    png = renderer.render_form(record)
    with PILImage.open(io.BytesIO(png)) as img:
        w, h = img.size
    return Image(io.BytesIO(png), width=FORM_WIDTH, height=FORM_WIDTH * h / w)


def build_forms_pdf(
    records: Iterable[PaymentRecord],
    output_path: Union[str, Path],
    renderer: Optional[FormRenderer] = None,
    title: str = "UPN payment orders",
) -> Path:
    """
    Builds PDF: title, payment register (table with amounts and total),
    then one filled UPN form per payment, two forms per page.
    """
    upn_records = [to_upn_record(r) for r in records]
    if not upn_records:
        raise ValueError("No payment records to print.")
    renderer = renderer or FormRenderer()

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        rightMargin=15 * mm,
        leftMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
    )
    story = []
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        name="CustomTitle",
        parent=styles["Heading1"],
        fontSize=16,
        spaceAfter=8 * mm,
    )
    story.append(Paragraph(title, title_style))
    story.append(Paragraph("Payment register", styles["Heading2"]))
    story.append(Spacer(1, 2 * mm))
    story.append(_register_table(upn_records))

    for idx, r in enumerate(upn_records):
        if idx % 2 == 0:
            story.append(PageBreak())
        else:
            story.append(Spacer(1, 10 * mm))
        story.append(_form_flowable(renderer, r))

    doc.build(story)
    logger.info("PDF with %d UPN form(s) written to %s", len(upn_records), output_path)
    return Path(output_path)


def format_payment_register_text(records: Iterable[PaymentRecord]) -> str:
    """Format payment register as plain text (e.g. for email body)."""
    upn_records = [to_upn_record(r) for r in records]
    total = sum((_amount(r) for r in upn_records), Decimal("0"))
    lines = [
        "Payment register",
        "",
        "#\tRecipient\tReference\tAmount (EUR)",
        "-" * 60,
    ]
    for idx, r in enumerate(upn_records, 1):
        rec = _ascii_slovenian(r.receiver_name or "")
        rec_short = (rec[:50] + "...") if len(rec) > 50 else rec
        lines.append(f"{idx}\t{rec_short}\t{r.receiver_reference}\t{_amount(r):.2f}")
    lines.append("-" * 60)
    lines.append(f"TOTAL\t\t\t{total:.2f}")
    return "\n".join(lines)
