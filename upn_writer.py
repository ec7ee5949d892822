# -*- coding: utf-8 -*-
"""
UPNWriter: one payment record, all outputs. Image work runs in a worker thread
so callers inside an event loop are not blocked.
"""
import asyncio
from pathlib import Path
from typing import Optional, Union

from upn_config import ResourceLocator
from upn_form import FormRenderer
from upn_qr import QR_SIZE, encode_record, render_qr
from upn_record import PaymentRecord, UPNRecord, to_upn_record


class UPNWriter:
    def __init__(
        self,
        record: PaymentRecord,
        locator: Optional[ResourceLocator] = None,
        renderer: Optional[FormRenderer] = None,
    ):
        self.record: UPNRecord = to_upn_record(record)
        self.renderer = renderer or FormRenderer(locator)

    def payload(self) -> str:
        """Encoded UPN QR text (what goes into the QR code)."""
        return encode_record(self.record)

    def is_form_rendering_available(self) -> bool:
        return self.renderer.is_available()

    async def qr_png(self, size: int = QR_SIZE) -> bytes:
        return await asyncio.to_thread(render_qr, self.record, size)

    async def form_png(self) -> bytes:
        return await asyncio.to_thread(self.renderer.render_form, self.record)

    async def form_base64(self) -> str:
        return await asyncio.to_thread(self.renderer.render_form_base64, self.record)

    async def save_form(self, output_path: Union[str, Path]) -> Path:
        return await asyncio.to_thread(self.renderer.save_form, self.record, output_path)
