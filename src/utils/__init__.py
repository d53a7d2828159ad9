"""Utilitários compartilhados (erros e redação)."""
