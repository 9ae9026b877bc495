"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (calendário, health)
- Validação inicial de request (cookies, query params, corpo JSON)
- Delegação para os serviços de app/services
- Respostas HTTP com envelope padronizado

Estrutura:
- routes/calendar/: eventos e calendários do usuário
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
