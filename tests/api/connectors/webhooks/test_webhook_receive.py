"""Testes do parse de requests de webhook."""

from __future__ import annotations

import hashlib
import hmac

import pytest

from api.connectors.webhooks import (
    InvalidJsonError,
    InvalidSignatureError,
    WebhookRequestError,
    first_header,
    parse_webhook_request,
)

SECRET = "segredo"
HEADERS = ("x-woovi-signature", "x-webhook-signature")


def _sign(body: bytes) -> str:
    return "sha256=" + hmac.new(SECRET.encode(), body, hashlib.sha256).hexdigest()


def test_first_header_is_case_insensitive_and_ordered() -> None:
    headers = {"X-Webhook-Signature": "b", "X-Woovi-Signature": "a"}
    assert first_header(headers, HEADERS) == "a"
    assert first_header({"x-webhook-signature": "b"}, HEADERS) == "b"
    assert first_header({"x-woovi-signature": ""}, HEADERS) is None


def test_valid_request_returns_payload() -> None:
    body = b'{"charge": {"status": "COMPLETED"}}'
    payload, result = parse_webhook_request(
        body,
        {"x-webhook-signature": _sign(body)},
        SECRET,
        signature_headers=HEADERS,
    )
    assert payload == {"charge": {"status": "COMPLETED"}}
    assert result.valid is True


def test_invalid_signature_raises() -> None:
    body = b'{"a": 1}'
    with pytest.raises(InvalidSignatureError, match="signature_mismatch"):
        parse_webhook_request(body, {"x-woovi-signature": "sha256=00"}, SECRET, signature_headers=HEADERS)


def test_missing_signature_raises() -> None:
    with pytest.raises(InvalidSignatureError, match="missing_signature"):
        parse_webhook_request(b'{"a": 1}', {}, SECRET, signature_headers=HEADERS)


def test_skipped_without_secret() -> None:
    payload, result = parse_webhook_request(b'{"a": 1}', {}, None, signature_headers=HEADERS)
    assert payload == {"a": 1}
    assert result.skipped is True


def test_invalid_json_raises() -> None:
    with pytest.raises(InvalidJsonError):
        parse_webhook_request(b"{nope", {}, None, signature_headers=HEADERS)


def test_non_object_json_raises() -> None:
    with pytest.raises(InvalidJsonError, match="payload_not_object"):
        parse_webhook_request(b"[1, 2]", {}, None, signature_headers=HEADERS)


def test_errors_share_base_class() -> None:
    assert issubclass(InvalidSignatureError, WebhookRequestError)
    assert issubclass(InvalidJsonError, WebhookRequestError)


def test_invalid_utf8_raises_invalid_json() -> None:
    with pytest.raises(InvalidJsonError, match="invalid_json"):
        parse_webhook_request(b'{"status": "\xff"}', {}, None, signature_headers=HEADERS)
