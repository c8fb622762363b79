"""Rotas HTTP da API: adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (sessões, health)
- Validação inicial de request (path params, body)
- Delegação para o gerenciador de sessões e use cases
- Respostas HTTP apropriadas

Estrutura:
- routes/sessions/: endpoints de sessões WhatsApp
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
