"""
Status canônicos de uma transação de pagamento.

Todo provedor (gateway, checkout hospedado, PIX estático, mock) tem seu
vocabulário traduzido para este enum antes de tocar o ledger. O valor
string é o contrato de wire da API.
"""

from enum import StrEnum


class TransactionStatus(StrEnum):
    """
    Status canônicos de uma transação.

    Status em andamento:
        - PENDING: Criada, aguardando pagamento/confirmação do provedor
        - AUTHORIZED: Cartão pré-autorizado, aguardando captura
        - FAILED: Recusada ou falha de transporte (pode receber confirmação tardia)
        - PAID: Liquidada (só sai via reembolso)

    Status finais:
        - CANCELED: Cancelada antes da liquidação
        - REFUNDED: Estornada após liquidação
        - EXPIRED: Cobrança expirou sem pagamento
    """

    PENDING = "pending"
    AUTHORIZED = "authorized"
    PAID = "paid"
    FAILED = "failed"
    CANCELED = "canceled"
    REFUNDED = "refunded"
    EXPIRED = "expired"

    def __str__(self) -> str:
        return self.value


# Uma vez em status final, a transação não muda mais de status
FINAL_STATUSES: frozenset[TransactionStatus] = frozenset({
    TransactionStatus.CANCELED,
    TransactionStatus.REFUNDED,
    TransactionStatus.EXPIRED,
})

DEFAULT_INITIAL_STATUS: TransactionStatus = TransactionStatus.PENDING


def is_final(status: TransactionStatus) -> bool:
    """Verifica se o status é final (sem transições de saída)."""
    return status in FINAL_STATUSES


def is_valid_status(value: object) -> bool:
    """
    Verifica se o valor é um status canônico.

    Aceita tanto membros do enum quanto a string de wire.
    """
    if isinstance(value, TransactionStatus):
        return True
    return isinstance(value, str) and value in TransactionStatus._value2member_map_


def parse_status(value: object) -> TransactionStatus | None:
    """Converte string de wire em TransactionStatus (None se desconhecida)."""
    if not is_valid_status(value):
        return None
    return TransactionStatus(value)
