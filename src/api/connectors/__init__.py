"""Connectors por provedor — adapters de borda para gateways de pagamento.

Estrutura:
- static_pix/: BR Code estático (sem rede)
- mock/: sandbox determinístico
- mercadopago/: gateway dinâmico (PIX e cartão)
- infinitepay/: checkout hospedado
- woovi/: cobrança Woovi/OpenPix
- webhooks/: assinatura HMAC e parsing de webhooks

Cada provedor implementa PaymentProviderProtocol, garantindo isolamento
de falhas e troca transparente pelo ProviderRegistry.
"""

__all__: list[str] = []
