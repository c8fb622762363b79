"""Protocolo para renderização do código de pareamento."""

from __future__ import annotations

from typing import Protocol


class CodeRendererProtocol(Protocol):
    """Converte o desafio emitido pelo provider em imagem exibível."""

    async def render(self, challenge: str) -> str:
        """Retorna a imagem do QR code como data URL."""
        ...
