from typing import List

from datagen.models.schemas.generation import GenerationResult
from datagen.services.sources.base import SourceAdapter, dict_items


class NewsAdapter(SourceAdapter):
    """Latest articles for the first keyword from NewsData.io."""

    source_name = "NewsData.io API"
    topic = "news"

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        keyword = keywords[0] if keywords else "technology"
        payload = await self._get_json(
            f"{self.settings.NEWSDATA_API_URL}/news",
            params={
                "apikey": self.settings.NEWSDATA_API_KEY,
                "q": keyword,
                "language": "en",
                "size": rows,
            },
        )
        articles = dict_items(payload.get("results")) if isinstance(payload, dict) else []
        data = [
            {
                "title": article.get("title"),
                "description": article.get("description") or "No description",
                "source": article.get("source_id"),
                "published_at": article.get("pubDate"),
                "category": (article.get("category") or ["general"])[0],
                "country": (article.get("country") or ["unknown"])[0],
            }
            for article in articles[:rows]
        ]
        return self._result(data, rows)


class SportsAdapter(SourceAdapter):
    """League directory from TheSportsDB."""

    source_name = "TheSportsDB API"
    topic = "sports"

    async def fetch(
        self, request: str, keywords: List[str], rows: int
    ) -> GenerationResult:
        payload = await self._get_json(
            f"{self.settings.SPORTSDB_API_URL}/all_leagues.php"
        )
        leagues = dict_items(payload.get("leagues")) if isinstance(payload, dict) else []
        data = [
            {
                "league_name": league.get("strLeague"),
                "sport": league.get("strSport"),
                "country": league.get("strCountry") or "International",
                "league_id": league.get("idLeague"),
                "alternate_name": league.get("strLeagueAlternate") or "N/A",
            }
            for league in leagues[:rows]
        ]
        return self._result(data, rows)
