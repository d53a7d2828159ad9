"""BR Code estático (PIX copia-e-cola) — TLV EMV + CRC16-CCITT.

Layout gerado:
    00 Payload Format Indicator = "01"
    01 Point of Initiation Method = "11" (estático)
    26 Merchant Account Information
       00 GUI = "br.gov.bcb.pix"
       01 Chave PIX
       02 Descrição (opcional)
    52 MCC = "0000"
    53 Moeda = "986" (BRL)
    54 Valor (opcional)
    58 País = "BR"
    59 Nome do recebedor (≤25)
    60 Cidade do recebedor (≤15)
    62 Additional Data Field
       05 TxID (≤25, alfanumérico, default "***")
    63 CRC16 (4 dígitos hex maiúsculos)

Módulo puro, sem I/O além do log de fallback dos defaults do recebedor.
"""

from __future__ import annotations

import base64
import logging
import re
import unicodedata
from dataclasses import dataclass

from config.logging import log_fallback

logger = logging.getLogger(__name__)

GUI_PIX = "br.gov.bcb.pix"
CRC_TAG_PREFIX = "6304"
DEFAULT_TXID = "***"
DEFAULT_MERCHANT_NAME = "AXIONPAY"
DEFAULT_MERCHANT_CITY = "SAO PAULO"

MAX_MERCHANT_NAME = 25
MAX_MERCHANT_CITY = 15
MAX_DESCRIPTION = 25
MAX_TXID = 25

_CRC_POLYNOMIAL = 0x1021
_CRC_INIT = 0xFFFF

_TEXT_STRIP_RE = re.compile(r"[^A-Z0-9 ]")
_TXID_STRIP_RE = re.compile(r"[^A-Z0-9]")
_CRC_SUFFIX_RE = re.compile(r"6304([0-9A-F]{4})$")


class BrCodeError(ValueError):
    """Dados insuficientes ou inválidos para gerar o BR Code."""


@dataclass(frozen=True, slots=True)
class BrCode:
    """Resultado da geração com os campos já normalizados."""

    payload: str
    merchant_name: str
    merchant_city: str
    txid: str
    description: str = ""

    @property
    def base64(self) -> str:
        return to_base64(self.payload)


def tlv(tag: str, value: object) -> str:
    """Codifica um campo TLV com tamanho de 2 dígitos.

    Raises:
        BrCodeError: Se o valor exceder 99 caracteres.
    """
    text = "" if value is None else str(value)
    if len(text) > 99:
        msg = f"Campo {tag} excede 99 caracteres"
        raise BrCodeError(msg)
    return f"{tag}{len(text):02d}{text}"


def crc16_ccitt(data: str) -> str:
    """CRC16-CCITT (poly 0x1021, init 0xFFFF) em 4 dígitos hex maiúsculos."""
    crc = _CRC_INIT
    for byte in data.encode("utf-8"):
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = (crc << 1) ^ _CRC_POLYNOMIAL
            else:
                crc <<= 1
            crc &= 0xFFFF
    return f"{crc:04X}"


def _strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(value: str | None, max_len: int) -> str:
    """Remove acentos, uppercase, mantém [A-Z0-9 ], trim e trunca."""
    cleaned = _TEXT_STRIP_RE.sub("", _strip_diacritics(value or "").upper())
    return cleaned.strip()[:max_len]


def normalize_txid(value: str | None) -> str:
    """TxID alfanumérico ≤25; vazio vira '***'."""
    raw = (value or "").strip()
    if raw == DEFAULT_TXID:
        return DEFAULT_TXID
    cleaned = _TXID_STRIP_RE.sub("", _strip_diacritics(raw).upper())
    return cleaned[:MAX_TXID] or DEFAULT_TXID


def _resolve_merchant(merchant_name: str | None, merchant_city: str | None) -> tuple[str, str]:
    name = (merchant_name or "").strip()
    city = (merchant_city or "").strip()
    if not name or not city:
        log_fallback(logger, "br_code_merchant", reason="merchant_defaults")
        logger.warning(
            "br_code_merchant_defaults",
            extra={"has_merchant_name": bool(name), "has_merchant_city": bool(city)},
        )
    return name or DEFAULT_MERCHANT_NAME, city or DEFAULT_MERCHANT_CITY


def build_br_code(
    pix_key: str,
    merchant_name: str | None = None,
    merchant_city: str | None = None,
    amount: str | None = None,
    txid: str | None = DEFAULT_TXID,
    description: str | None = None,
) -> BrCode:
    """Monta o BR Code estático.

    Args:
        pix_key: Chave PIX do recebedor (obrigatória)
        merchant_name: Nome do recebedor (default AXIONPAY)
        merchant_city: Cidade do recebedor (default SAO PAULO)
        amount: Valor decimal já formatado (ex: "12.34"); omitido se vazio
        txid: Identificador da cobrança
        description: Texto livre curto

    Returns:
        BrCode com payload terminando em 6304 + CRC

    Raises:
        BrCodeError: Se a chave PIX estiver ausente.
    """
    key = (pix_key or "").strip()
    if not key:
        msg = "Chave PIX não configurada"
        raise BrCodeError(msg)

    raw_name, raw_city = _resolve_merchant(merchant_name, merchant_city)
    safe_name = normalize_text(raw_name, MAX_MERCHANT_NAME) or DEFAULT_MERCHANT_NAME
    safe_city = normalize_text(raw_city, MAX_MERCHANT_CITY) or DEFAULT_MERCHANT_CITY
    safe_description = normalize_text(description, MAX_DESCRIPTION) if description else ""
    safe_txid = normalize_txid(txid)

    account_info = tlv("00", GUI_PIX) + tlv("01", key)
    if safe_description:
        account_info += tlv("02", safe_description)

    partial = "".join((
        tlv("00", "01"),
        tlv("01", "11"),
        tlv("26", account_info),
        tlv("52", "0000"),
        tlv("53", "986"),
        tlv("54", amount) if amount else "",
        tlv("58", "BR"),
        tlv("59", safe_name),
        tlv("60", safe_city),
        tlv("62", tlv("05", safe_txid)),
    ))
    to_crc = partial + CRC_TAG_PREFIX
    payload = to_crc + crc16_ccitt(to_crc)

    return BrCode(
        payload=payload,
        merchant_name=safe_name,
        merchant_city=safe_city,
        txid=safe_txid,
        description=safe_description,
    )


def generate_br_code(pix_key: str, **kwargs: str | None) -> str:
    """Atalho que retorna apenas o texto do payload."""
    return build_br_code(pix_key, **kwargs).payload


def verify_br_code(payload: str) -> bool:
    """Valida o CRC de um BR Code (sufixo 6304 + 4 hex maiúsculos)."""
    if not payload:
        return False
    match = _CRC_SUFFIX_RE.search(payload)
    if match is None:
        return False
    return crc16_ccitt(payload[:-4]) == match.group(1)


def to_base64(payload: str) -> str:
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")
