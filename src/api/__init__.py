"""API — camada de borda e adapters de provedores.

Responsabilidades:
- Receber requests HTTP (pagamentos e webhooks)
- Validar assinaturas e payloads
- Normalizar webhooks externos para modelos internos
- Construir payloads externos (BR Code PIX)
- Falar com os gateways de pagamento (connectors)

Subpastas:
- connectors/: adapters HTTP por provedor + verificação de webhooks
- normalizers/: conversão de webhooks externos → WebhookUpdate
- payload_builders/: construção de payloads (BR Code estático)
- validators/: validação de payloads HTTP
- routes/: endpoints HTTP (pagamentos, webhooks, health)

NÃO PODE conter: FSM, regras de transição, orquestração de use cases.
"""
