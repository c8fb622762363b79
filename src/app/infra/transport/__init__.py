"""Integração com o Transport Provider."""

from app.infra.transport.loader import load_transport_provider

__all__ = ["load_transport_provider"]
