import asyncio
import io

import pytest
from PIL import Image

import upn_form
from upn_form import FormRenderingUnavailable
from upn_qr import encode_record
from upn_writer import UPNWriter


def test_payload_matches_encoder(legacy_record, locator):
    writer = UPNWriter(legacy_record, locator=locator)
    assert writer.payload() == encode_record(legacy_record)
    assert writer.record.payment_date == "11.07.2024"


def test_qr_png(new_record, locator):
    png = asyncio.run(UPNWriter(new_record, locator=locator).qr_png())
    with Image.open(io.BytesIO(png)) as img:
        assert img.size == (250, 250)


def test_form_outputs(new_record, locator, tmp_path):
    writer = UPNWriter(new_record, locator=locator)

    async def run():
        return await asyncio.gather(
            writer.form_png(),
            writer.form_base64(),
            writer.save_form(tmp_path / "upn.png"),
        )

    png, b64, path = asyncio.run(run())
    assert png.startswith(b"\x89PNG")
    assert b64.startswith("iVBORw0KGgo")
    assert path.read_bytes() == png


def test_capability_reported_without_rendering(new_record, locator, monkeypatch):
    monkeypatch.setattr(upn_form, "check_raster_backend", lambda: False)
    writer = UPNWriter(new_record, locator=locator)
    assert writer.is_form_rendering_available() is False
    with pytest.raises(FormRenderingUnavailable):
        asyncio.run(writer.form_png())
    # QR-only generation still works
    assert asyncio.run(writer.qr_png()).startswith(b"\x89PNG")
