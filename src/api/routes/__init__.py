"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (pagamentos, webhooks, health)
- Validação inicial de request (headers, query params, corpo)
- Delegação para os use cases de pagamento
- Respostas HTTP no formato `{"ok": ..., ...}`

Estrutura:
- routes/payments/: criação, consultas e ciclo de vida
- routes/webhooks/: webhooks dos provedores
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
