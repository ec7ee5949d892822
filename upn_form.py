# -*- coding: utf-8 -*-
"""
Заполнение бланка UPN: QR-код и текстовые поля поверх шаблона (upn_sl.png).
Coordinates are pixel positions on the 1240-px wide Slovenian UPN template;
text is drawn on its baseline.
"""
import base64
import io
import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageDraw, ImageFont, features

from upn_config import ResourceLocator
from upn_qr import QR_SIZE, render_qr
from upn_record import PaymentRecord, display_fields, to_upn_record

logger = logging.getLogger(__name__)

QR_POSITION = (415, 42)
LARGE_FONT_SIZE = 24
SMALL_FONT_SIZE = 20
TEXT_COLOR = (0, 0, 0)

# Правая часть бланка (nalog), крупный шрифт
LARGE_FIELDS = [
    ("payer_name", (697, 170)),
    ("payer_address", (697, 201)),
    ("payer_post", (697, 233)),
    ("receiver_name", (418, 507)),
    ("receiver_address", (418, 538)),
    ("receiver_post", (418, 570)),
    ("receiver_iban", (418, 400)),
    ("reference_prefix", (418, 451)),
    ("reference_suffix", (528, 451)),
    ("purpose", (528, 340)),
    ("code", (418, 340)),
    ("amount", (750, 285)),
]
LARGE_DATE_POSITION = (1155, 340)

# Левая часть бланка (potrdilo), мелкий шрифт
SMALL_FIELDS = [
    ("payer_name", (30, 62)),
    ("payer_address", (30, 87)),
    ("payer_post", (30, 112)),
    ("receiver_name", (30, 405)),
    ("receiver_address", (30, 430)),
    ("receiver_post", (30, 455)),
    ("receiver_iban", (30, 300)),
    ("receiver_reference", (30, 351)),
    ("purpose", (30, 165)),
]
SMALL_DATE_POSITION = (30, 180)


class FormRenderingUnavailable(RuntimeError):
    """Raster text backend (Pillow FreeType support) is not present."""


def check_raster_backend() -> bool:
    return features.check("freetype2")


class FormRenderer:
    """
    Renders the full UPN form. Backend availability is detected once here;
    when absent, every render call raises FormRenderingUnavailable.
    """

    def __init__(self, locator: Optional[ResourceLocator] = None):
        self.locator = locator or ResourceLocator.from_env()
        self._available = check_raster_backend()
        if not self._available:
            logger.warning("Form rendering unavailable: Pillow built without FreeType support")

    def is_available(self) -> bool:
        return self._available

    def _require_backend(self) -> None:
        if not self._available:
            raise FormRenderingUnavailable(
                "PNG form generation requires Pillow with FreeType support, which is not "
                "available in this environment. Use QR code generation only."
            )

    def _load_font(self, size: int):
        font_path = self.locator.font_path
        if font_path is not None:
            try:
                return ImageFont.truetype(str(font_path), size)
            except OSError as e:
                logger.warning("Could not load font %s: %s", font_path, e)
        return ImageFont.load_default(size=size)

    def render_form_image(self, record: PaymentRecord) -> Image.Image:
        self._require_backend()
        r = to_upn_record(record)

        with Image.open(self.locator.template_path) as template:
            image = template.convert("RGB")

        qr = Image.open(io.BytesIO(render_qr(r, size=QR_SIZE))).convert("RGB")
        image.paste(qr, QR_POSITION)

        values = display_fields(r)
        draw = ImageDraw.Draw(image)

        large = self._load_font(LARGE_FONT_SIZE)
        for name, xy in LARGE_FIELDS:
            draw.text(xy, values[name], font=large, fill=TEXT_COLOR, anchor="ls")
        if values["payment_date"]:
            draw.text(LARGE_DATE_POSITION, values["payment_date"], font=large, fill=TEXT_COLOR, anchor="ls")

        small = self._load_font(SMALL_FONT_SIZE)
        for name, xy in SMALL_FIELDS:
            draw.text(xy, values[name], font=small, fill=TEXT_COLOR, anchor="ls")
        if values["payment_date"]:
            draw.text(SMALL_DATE_POSITION, values["payment_date"], font=small, fill=TEXT_COLOR, anchor="ls")

        return image

    def render_form(self, record: PaymentRecord) -> bytes:
        """PNG bytes of the filled form."""
        img = self.render_form_image(record)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    def render_form_base64(self, record: PaymentRecord) -> str:
        return base64.b64encode(self.render_form(record)).decode("ascii")

    def save_form(self, record: PaymentRecord, output_path: Union[str, Path]) -> Path:
        self._require_backend()
        path = Path(output_path)
        path.write_bytes(self.render_form(record))
        logger.info("UPN image saved as %s", path)
        return path
