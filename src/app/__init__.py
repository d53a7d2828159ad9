"""App — coração do sistema: orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: Transaction, eventos e vocabulário de status
- use_cases/: casos de uso de pagamento (sem IO direto)
- services/: registry/router de provedores e guarda de idempotência
- infra/: implementações concretas de IO (stores)
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas como logs

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
