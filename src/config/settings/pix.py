"""Settings do PIX estático (BR Code)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class PixSettings:
    """Dados do recebedor do BR Code estático.

    Attributes:
        pix_key: Chave PIX do recebedor
        merchant_name: Nome exibido (≤ 25 após normalização)
        merchant_city: Cidade (≤ 15 após normalização)
        description: Descrição opcional incluída no payload
    """

    pix_key: str = ""
    merchant_name: str = ""
    merchant_city: str = ""
    description: str = ""

    def validate(self) -> list[str]:
        """PIX_KEY é obrigatória; nome/cidade têm fallback com warning."""
        errors: list[str] = []
        if not self.pix_key:
            errors.append("PIX_KEY não configurada (PIX estático indisponível)")
        return errors


def _load_pix_from_env() -> PixSettings:
    return PixSettings(
        pix_key=os.getenv("PIX_KEY", "").strip(),
        merchant_name=os.getenv("PIX_MERCHANT_NAME", "").strip(),
        merchant_city=os.getenv("PIX_MERCHANT_CITY", "").strip(),
        description=os.getenv("PIX_DESCRIPTION", "").strip(),
    )


@lru_cache(maxsize=1)
def get_pix_settings() -> PixSettings:
    """Retorna instância cacheada de PixSettings."""
    return _load_pix_from_env()


__all__ = ["PixSettings", "get_pix_settings"]
