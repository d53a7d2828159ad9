"""Exceções de domínio e de infraestrutura do core de pagamentos.

Taxonomia de erros de negócio (code → HTTP):
- invalid_request (400): campos ausentes ou malformados
- invalid_method (400): método de pagamento não suportado
- not_found (404): transação/referência desconhecida
- invalid_status (409): transição de estado ilegal
- insufficient_amount (400): reembolso maior que o valor disponível
- invalid_signature (401): falha de autenticidade de webhook
- idempotency_in_progress (409): chave reservada, transação ainda não visível
- internal_error (500/502): exceção inesperada de adapter/transporte
"""

from __future__ import annotations


class PaymentError(Exception):
    """Base para erros operacionais expostos ao cliente.

    Attributes:
        message: Mensagem segura para o cliente (sem PII)
        code: Código estável da taxonomia
        status_code: Status HTTP correspondente
    """

    code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, object]:
        """Corpo de erro padrão da API."""
        return {"ok": False, "error": self.message, "code": self.code}


class InvalidRequestError(PaymentError):
    """Payload malformado ou campos obrigatórios ausentes."""

    code = "invalid_request"
    status_code = 400


class InvalidMethodError(PaymentError):
    """Método de pagamento não suportado para a operação."""

    code = "invalid_method"
    status_code = 400


class NotFoundError(PaymentError):
    """Transação ou referência de provedor desconhecida."""

    code = "not_found"
    status_code = 404


class InvalidStatusError(PaymentError):
    """Transição de estado ilegal para o status atual."""

    code = "invalid_status"
    status_code = 409


class InsufficientAmountError(PaymentError):
    """Valor solicitado excede o valor disponível da transação."""

    code = "insufficient_amount"
    status_code = 400


class InvalidSignatureError(PaymentError):
    """Webhook sem autenticidade válida."""

    code = "invalid_signature"
    status_code = 401


class IdempotencyInProgressError(PaymentError):
    """Chave de idempotência reservada por requisição ainda em andamento."""

    code = "idempotency_in_progress"
    status_code = 409


class InternalError(PaymentError):
    """Falha inesperada (nunca expõe detalhes internos)."""

    code = "internal_error"
    status_code = 500


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class FirestoreUnavailableError(InfrastructureError):
    """Falha de indisponibilidade ao acessar Firestore."""


class ProviderTransportError(InfrastructureError):
    """Falha de transporte ao chamar um provedor (timeout, DNS, 5xx).

    Recusas de negócio NUNCA usam esta exceção: são reportadas como
    ProviderResult(success=False).
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class StatusConflictError(InvalidStatusError):
    """Compare-and-set falhou: o status mudou entre leitura e escrita."""

    def __init__(self, message: str, *, current_status: str | None = None) -> None:
        super().__init__(message)
        self.current_status = current_status
