#!/usr/bin/env python3
"""Gera um BR Code PIX estático a partir da chave configurada.

Uso:
    python scripts/generate_br_code.py --amount 12.34 --txid PEDIDO123
    python scripts/generate_br_code.py --amount-cents 1234 --base64

Chave, nome e cidade vêm de PIX_KEY, PIX_MERCHANT_NAME e PIX_MERCHANT_CITY
quando não informados por argumento.
"""

from __future__ import annotations

import argparse
import sys
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from api.payload_builders.pix import BrCodeError, build_br_code
from config.settings import get_pix_settings


def format_amount(amount: str | None, amount_cents: int | None) -> str | None:
    """Valor decimal com 2 casas (ex: "12.34"); None omite o campo 54."""
    if amount_cents is not None:
        if amount_cents <= 0:
            raise ValueError("--amount-cents deve ser inteiro positivo")
        return f"{Decimal(amount_cents) / 100:.2f}"
    if amount is None:
        return None
    try:
        value = Decimal(amount)
    except InvalidOperation as exc:
        raise ValueError("--amount deve ser numero positivo") from exc
    if not value.is_finite() or value <= 0:
        raise ValueError("--amount deve ser numero positivo")
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--pix-key", default=None, help="Chave PIX. Padrao: PIX_KEY.")
    parser.add_argument("--merchant-name", default=None, help="Nome do recebedor. Padrao: PIX_MERCHANT_NAME.")
    parser.add_argument("--merchant-city", default=None, help="Cidade do recebedor. Padrao: PIX_MERCHANT_CITY.")
    amount_group = parser.add_mutually_exclusive_group()
    amount_group.add_argument("--amount", default=None, help="Valor decimal (ex: 12.34).")
    amount_group.add_argument("--amount-cents", type=int, default=None, help="Valor em centavos.")
    parser.add_argument("--txid", default="***", help="Identificador da cobranca (padrao ***).")
    parser.add_argument("--description", default=None, help="Descricao curta. Padrao: PIX_DESCRIPTION.")
    parser.add_argument("--base64", action="store_true", help="Imprime tambem a versao base64.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_pix_settings()

    try:
        br_code = build_br_code(
            args.pix_key or settings.pix_key,
            merchant_name=args.merchant_name or settings.merchant_name,
            merchant_city=args.merchant_city or settings.merchant_city,
            amount=format_amount(args.amount, args.amount_cents),
            txid=args.txid,
            description=args.description or settings.description or None,
        )
    except (BrCodeError, ValueError) as exc:
        print(f"erro: {exc}", file=sys.stderr)
        return 2

    print(br_code.payload)
    if args.base64:
        print(br_code.base64)
    return 0


if __name__ == "__main__":
    sys.exit(main())
