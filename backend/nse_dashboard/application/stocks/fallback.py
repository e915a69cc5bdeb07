from __future__ import annotations

from nse_dashboard.domain.stocks.schemas import DEFAULT_SHARES_OUTSTANDING, EquityQuote

_MOCK_ROWS: tuple[tuple[str, str, float, int, float], ...] = (
    ("RELIANCE", "Reliance Industries", 2500, 5_000_000, 2.5),
    ("TCS", "Tata Consultancy Services", 3500, 3_000_000, -1.2),
    ("HDFCBANK", "HDFC Bank", 1600, 4_000_000, 1.8),
    ("INFY", "Infosys", 1400, 3_500_000, -0.5),
    ("ICICIBANK", "ICICI Bank", 950, 3_200_000, 1.1),
    ("HINDUNILVR", "Hindustan Unilever", 2600, 2_800_000, -0.8),
    ("ITC", "ITC", 440, 2_500_000, 0.9),
    ("SBIN", "State Bank of India", 580, 2_200_000, 1.5),
    ("BHARTIARTL", "Bharti Airtel", 860, 2_000_000, -1.0),
    ("KOTAKBANK", "Kotak Mahindra Bank", 1750, 1_800_000, 0.7),
)


class StaticEquityFallbackProvider:
    """Fixed dataset served when NSE is unreachable so the dashboard always renders."""

    def __init__(self, *, shares_outstanding: int = DEFAULT_SHARES_OUTSTANDING) -> None:
        self._shares_outstanding = shares_outstanding

    def load(self) -> list[EquityQuote]:
        return [
            EquityQuote(
                symbol=symbol,
                name=name,
                last_price=float(last_price),
                total_traded_volume=volume,
                p_change=p_change,
                market_cap=float(last_price) * self._shares_outstanding,
            )
            for symbol, name, last_price, volume, p_change in _MOCK_ROWS
        ]
