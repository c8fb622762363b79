"""Renderização do código de pareamento como imagem PNG em data URL."""

from __future__ import annotations

import asyncio
import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

DATA_URL_PREFIX = "data:image/png;base64,"


class QrCodeRenderer:
    """Renderiza o desafio do provider como QR code PNG.

    A geração da imagem é CPU-bound e roda em thread.
    """

    __slots__ = ("_border", "_box_size", "_error_correction")

    def __init__(
        self,
        *,
        box_size: int = 4,
        border: int = 4,
        error_correction: int = ERROR_CORRECT_M,
    ) -> None:
        self._box_size = box_size
        self._border = border
        self._error_correction = error_correction

    def render_png(self, challenge: str) -> bytes:
        qr = qrcode.QRCode(
            error_correction=self._error_correction,
            box_size=self._box_size,
            border=self._border,
        )
        qr.add_data(challenge)
        qr.make(fit=True)
        img = qr.make_image(fill_color="#000000", back_color="#FFFFFF").convert("RGB")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    async def render(self, challenge: str) -> str:
        png = await asyncio.to_thread(self.render_png, challenge)
        return DATA_URL_PREFIX + base64.b64encode(png).decode("ascii")
