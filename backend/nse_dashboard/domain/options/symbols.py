from __future__ import annotations

import re

_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9&.-]{1,20}$")

# User-facing names like "NIFTY 50" or "BANK NIFTY" resolve to the symbol NSE expects.
_SYMBOL_ALIASES = {
    "NIFTY": "NIFTY",
    "NIFTY50": "NIFTY",
    "NIFTY 50": "NIFTY",
    "BANKNIFTY": "BANKNIFTY",
    "BANK NIFTY": "BANKNIFTY",
    "NIFTY BANK": "BANKNIFTY",
    "FINNIFTY": "FINNIFTY",
    "NIFTY FIN SERVICE": "FINNIFTY",
    "MIDCPNIFTY": "MIDCPNIFTY",
    "NIFTY MID SELECT": "MIDCPNIFTY",
    "NIFTYNXT50": "NIFTYNXT50",
    "NIFTY NEXT 50": "NIFTYNXT50",
}

INDEX_SYMBOLS = frozenset({"NIFTY", "BANKNIFTY", "FINNIFTY", "MIDCPNIFTY", "NIFTYNXT50"})


def normalize_symbol(symbol: str) -> str:
    raw = (symbol or "").strip().upper()
    if not raw:
        raise ValueError("OPTIONS_INVALID_SYMBOL")

    resolved = _SYMBOL_ALIASES.get(raw)
    if resolved is None:
        collapsed = raw.replace(" ", "")
        resolved = _SYMBOL_ALIASES.get(collapsed, collapsed)

    if not _SYMBOL_PATTERN.fullmatch(resolved):
        raise ValueError("OPTIONS_INVALID_SYMBOL")
    return resolved


def is_index_symbol(symbol: str) -> bool:
    return symbol in INDEX_SYMBOLS
