"""Renderizadores de código de pareamento."""

from app.infra.qr.renderer import DATA_URL_PREFIX, QrCodeRenderer

__all__ = ["DATA_URL_PREFIX", "QrCodeRenderer"]
