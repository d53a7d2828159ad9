"""Payload builders — construção de payloads para sistemas externos.

Estrutura:
- pix/: BR Code estático (TLV EMV + CRC16)

Payloads enviados aos gateways ficam junto de cada adapter em
api/connectors/<provedor>/.
"""

__all__: list[str] = []
