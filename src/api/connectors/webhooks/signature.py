"""Verificação HMAC de webhooks de provedores de pagamento."""

from __future__ import annotations

import hashlib
import hmac
import re
import time
from dataclasses import dataclass
from datetime import UTC, datetime

_SUPPORTED_ALGORITHMS = {"sha1": hashlib.sha1, "sha256": hashlib.sha256}
_MILLISECONDS_THRESHOLD = 1e12
_HEX_RE = re.compile(r"^[0-9a-f]+\Z")


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da verificação de assinatura.

    skipped=True indica que não há secret configurado (valid também é
    True); o caller deve logar em nível warning.
    """

    valid: bool
    skipped: bool = False
    error: str | None = None


def parse_signature_header(header: str) -> tuple[str, str]:
    """Separa `<alg>=<hex>`; hex puro assume sha256."""
    value = header.strip()
    algorithm, sep, digest = value.partition("=")
    if sep and algorithm.lower() in _SUPPORTED_ALGORITHMS and "=" not in digest:
        return algorithm.lower(), digest
    return "sha256", value


def parse_timestamp(value: str | None) -> float | None:
    """Converte timestamp do header em epoch (segundos).

    Aceita epoch em segundos, epoch em milissegundos (> 1e12) e ISO 8601.
    """
    if not value:
        return None
    normalized = str(value).strip()
    if not normalized:
        return None
    if normalized.isascii() and normalized.isdigit():
        numeric = float(normalized)
        return numeric / 1000 if numeric > _MILLISECONDS_THRESHOLD else numeric
    try:
        parsed = datetime.fromisoformat(normalized.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.timestamp()


def is_timestamp_fresh(
    timestamp: float,
    tolerance_seconds: float | None,
    *,
    now: float | None = None,
) -> bool:
    """Sem tolerância configurada qualquer timestamp válido é aceito."""
    if not tolerance_seconds:
        return True
    current = time.time() if now is None else now
    return abs(current - timestamp) <= tolerance_seconds


def verify_signature(
    raw_body: bytes | None,
    signature_header: str | None,
    secret: str | None,
    *,
    timestamp_header: str | None = None,
    tolerance_seconds: float | None = None,
    require_timestamp: bool = False,
) -> SignatureResult:
    """Verifica assinatura HMAC do corpo bruto do webhook.

    Args:
        raw_body: Corpo bruto exatamente como recebido
        signature_header: Valor do header de assinatura
        secret: Secret compartilhado com o provedor
        timestamp_header: Valor do header de timestamp (opcional)
        tolerance_seconds: Janela aceita para o timestamp
        require_timestamp: Exige timestamp mesmo quando ausente

    Returns:
        SignatureResult (nunca levanta exceção)
    """
    if not secret:
        return SignatureResult(valid=True, skipped=True)
    if not raw_body:
        return SignatureResult(valid=False, error="missing_raw_body")
    if not signature_header:
        return SignatureResult(valid=False, error="missing_signature")

    if require_timestamp or timestamp_header:
        timestamp = parse_timestamp(timestamp_header)
        if timestamp is None:
            return SignatureResult(valid=False, error="invalid_timestamp")
        if not is_timestamp_fresh(timestamp, tolerance_seconds):
            return SignatureResult(valid=False, error="timestamp_out_of_tolerance")

    algorithm, provided = parse_signature_header(signature_header)
    digest = hmac.new(
        secret.encode("utf-8"),
        raw_body,
        _SUPPORTED_ALGORITHMS[algorithm],
    ).hexdigest()

    candidate = provided.strip().lower()
    if not _HEX_RE.match(candidate):
        return SignatureResult(valid=False, error="signature_malformed")
    if not hmac.compare_digest(digest, candidate):
        return SignatureResult(valid=False, error="signature_mismatch")
    return SignatureResult(valid=True)
