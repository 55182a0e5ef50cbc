from typing import List

from datagen.models.schemas.generation import GenerationResult
from datagen.services.sources.base import SourceAdapter


class CoinGeckoMarketsAdapter(SourceAdapter):
    """Top assets by market cap from the CoinGecko markets endpoint."""

    source_name = "CoinGecko API"
    topic = "finance"

    async def _markets(self, rows: int) -> list:
        payload = await self._get_json(
            f"{self.settings.COINGECKO_API_URL}/coins/markets",
            params={
                "vs_currency": "usd",
                "order": "market_cap_desc",
                "per_page": rows,
                "page": 1,
                "sparkline": "false",
            },
        )
        return self._as_list(payload)

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        raw = await self._markets(rows)
        data = [
            {
                "name": item.get("name"),
                "symbol": (item.get("symbol") or "").upper(),
                "current_price": item.get("current_price"),
                "market_cap": item.get("market_cap"),
                "price_change_24h": item.get("price_change_percentage_24h"),
                "total_volume": item.get("total_volume"),
            }
            for item in raw[:rows]
        ]
        return self._result(data, rows)


class CryptoAdapter(CoinGeckoMarketsAdapter):
    topic = "crypto"

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        raw = await self._markets(rows)
        data = [
            {
                "name": coin.get("name"),
                "symbol": (coin.get("symbol") or "").upper(),
                "current_price": coin.get("current_price"),
                "market_cap": coin.get("market_cap"),
                "market_cap_rank": coin.get("market_cap_rank"),
                "price_change_24h": coin.get("price_change_percentage_24h"),
                "total_volume": coin.get("total_volume"),
                "circulating_supply": coin.get("circulating_supply"),
                "ath": coin.get("ath"),
                "ath_date": coin.get("ath_date"),
            }
            for coin in raw[:rows]
        ]
        return self._result(data, rows)
