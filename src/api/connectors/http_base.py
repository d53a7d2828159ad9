"""Cliente HTTP base para adapters de provedores de pagamento.

Cobranças não são idempotentes do lado de todos os gateways, então só
há retry quando a requisição comprovadamente não saiu (falha de conexão)
ou foi rejeitada por rate limit (429). Timeout e 5xx viram
ProviderTransportError imediatamente.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from utils.errors import ProviderTransportError

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    base_url: str = ""
    timeout_seconds: float = 10.0
    max_retries: int = 2
    backoff_base_seconds: float = 0.5
    backoff_max_seconds: float = 5.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpClient:
    """Cliente HTTP assíncrono usado pelos adapters.

    Args:
        config: Configuração (base_url, timeout, retries, headers)
        provider: Nome do provedor para logs e erros
        transport: Transport httpx alternativo (ex: httpx.MockTransport em testes)
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        *,
        provider: str = "",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._provider = provider
        self._transport = transport

    @property
    def config(self) -> HttpClientConfig:
        return self._config

    def _url(self, path_or_url: str) -> str:
        if path_or_url.startswith(("http://", "https://")):
            return path_or_url
        base = self._config.base_url.rstrip("/")
        path = path_or_url if path_or_url.startswith("/") else f"/{path_or_url}"
        return f"{base}{path}"

    async def post(
        self,
        path_or_url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("POST", path_or_url, json=json, headers=headers)

    async def get(
        self,
        path_or_url: str,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("GET", path_or_url, headers=headers)

    async def request(
        self,
        method: str,
        path_or_url: str,
        *,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Executa a requisição.

        Returns:
            Resposta com status < 500 (4xx são recusas de negócio do caller).

        Raises:
            ProviderTransportError: timeout, falha de conexão, 5xx ou 429 esgotado.
        """
        url = self._url(path_or_url)
        merged_headers = {**self._config.default_headers, **(headers or {})}
        for attempt in range(self._config.max_retries + 1):
            try:
                async with httpx.AsyncClient(
                    verify=self._config.verify_ssl,
                    transport=self._transport,
                ) as client:
                    response = await client.request(
                        method,
                        url,
                        json=json,
                        headers=merged_headers,
                        timeout=self._config.timeout_seconds,
                    )
            except httpx.ConnectError as exc:
                if attempt >= self._config.max_retries:
                    raise ProviderTransportError(
                        "http_connection_error", provider=self._provider
                    ) from exc
                await _backoff_sleep(
                    attempt,
                    self._config.backoff_base_seconds,
                    self._config.backoff_max_seconds,
                )
                continue
            except httpx.TimeoutException as exc:
                raise ProviderTransportError("http_timeout", provider=self._provider) from exc
            except httpx.HTTPError as exc:
                raise ProviderTransportError("http_transport_error", provider=self._provider) from exc

            if response.status_code >= 500:
                raise ProviderTransportError(
                    "http_upstream_error",
                    provider=self._provider,
                    status_code=response.status_code,
                )
            if response.status_code == 429:
                if attempt >= self._config.max_retries:
                    raise ProviderTransportError(
                        "http_rate_limited",
                        provider=self._provider,
                        status_code=429,
                    )
                await _backoff_sleep(
                    attempt,
                    self._config.backoff_base_seconds,
                    self._config.backoff_max_seconds,
                )
                continue
            return response
        raise ProviderTransportError("http_retry_exhausted", provider=self._provider)


def response_json(response: httpx.Response) -> Any:
    """Corpo JSON da resposta ou {} quando não for JSON."""
    try:
        return response.json()
    except ValueError:
        return {}


async def _backoff_sleep(attempt: int, base: float, max_seconds: float) -> None:
    backoff = min((2**attempt) * base, max_seconds)
    logger.info("http_backoff", extra={"backoff_seconds": backoff})
    await asyncio.sleep(backoff)
