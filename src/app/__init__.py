"""App — coração do sistema: serviços, infraestrutura e wiring.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: modelos de evento, credenciais e janelas de visualização
- services/: gateway, retry, rate limit, cache, sync e estado de visualização
- infra/: implementações concretas de IO (Google Calendar, OAuth)
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas via logs estruturados

Padrão: app executa; api adapta; config configura; utils apoia.
"""
