"""Resolução do Transport Provider configurado.

O provider é indicado por um caminho `modulo:callable`. O callable é
invocado com as settings do transporte e deve retornar um objeto que
satisfaça `TransportProviderProtocol`.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, cast

from utils.errors import ValidationError

if TYPE_CHECKING:
    from app.protocols.transport import TransportProviderProtocol
    from config.settings import WhatsAppSettings

logger = logging.getLogger(__name__)


def _resolve(path: str) -> object:
    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValidationError(f"Transport factory inválida (esperado 'modulo:callable'): {path!r}")
    try:
        target: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise ValidationError(f"Módulo do transport não encontrado: {module_name}") from exc
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as exc:
            raise ValidationError(f"Transport factory não encontrada: {path}") from exc
    return target


def load_transport_provider(settings: WhatsAppSettings) -> TransportProviderProtocol:
    """Importa e invoca a factory configurada em WA_TRANSPORT_FACTORY.

    Raises:
        ValidationError: Se o caminho for inválido ou a factory não for callable
    """
    factory = _resolve(settings.transport_factory)
    if not callable(factory):
        raise ValidationError(f"Transport factory não é callable: {settings.transport_factory}")
    provider = factory(settings)
    logger.info(
        "transport_provider_loaded",
        extra={"factory": settings.transport_factory, "provider": type(provider).__name__},
    )
    return cast("TransportProviderProtocol", provider)
