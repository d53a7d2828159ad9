"""Settings do ledger de transações."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

LedgerBackend = Literal["memory", "firestore"]


@dataclass(frozen=True)
class LedgerSettings:
    """Configurações do ledger.

    Attributes:
        backend: memory (dev/test) ou firestore
        project_id: Projeto Firestore (usa GCP_PROJECT se vazio)
        collection_transactions: Collection das transações
        events_subcollection: Subcollection de eventos por transação
    """

    backend: LedgerBackend = "memory"
    project_id: str = ""
    collection_transactions: str = "transactions"
    events_subcollection: str = "events"

    def validate(self, base: BaseSettings) -> list[str]:
        errors: list[str] = []

        if self.backend not in {"memory", "firestore"}:
            errors.append(f"LEDGER_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_local:
            errors.append("LEDGER_BACKEND=memory proibido em staging/production")

        if self.backend == "firestore" and not (self.project_id or base.gcp_project):
            errors.append("LEDGER_BACKEND=firestore requer FIRESTORE_PROJECT_ID ou GCP_PROJECT")

        if not self.collection_transactions:
            errors.append("FIRESTORE_COLLECTION_TRANSACTIONS não pode ser vazio")

        return errors


def _load_ledger_from_env() -> LedgerSettings:
    """Carrega LedgerSettings de variáveis de ambiente."""
    backend_str = os.getenv("LEDGER_BACKEND", "memory").lower()
    backend: LedgerBackend = backend_str if backend_str in ("memory", "firestore") else "memory"
    return LedgerSettings(
        backend=backend,
        project_id=os.getenv("FIRESTORE_PROJECT_ID", ""),
        collection_transactions=os.getenv("FIRESTORE_COLLECTION_TRANSACTIONS", "transactions"),
        events_subcollection=os.getenv("FIRESTORE_EVENTS_SUBCOLLECTION", "events"),
    )


@lru_cache(maxsize=1)
def get_ledger_settings() -> LedgerSettings:
    """Retorna instância cacheada de LedgerSettings."""
    return _load_ledger_from_env()


__all__ = ["LedgerBackend", "LedgerSettings", "get_ledger_settings"]
