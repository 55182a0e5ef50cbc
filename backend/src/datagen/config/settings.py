from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings.
    You can override these values by creating a .env file in the root directory.
    Settings are loaded once at startup and are immutable afterwards.
    """

    # API settings
    PROJECT_NAME: str = "Data Generator"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # Generative AI settings. The key is read from either variable name.
    GOOGLE_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "GOOGLE_API_KEY", "GOOGLE_GENERATIVE_AI_API_KEY"
        ),
    )
    GEMINI_MODEL: str = "gemini-2.5-flash"
    LLM_TEMPERATURE: float = 0.8
    LLM_CALL_TIMEOUT_SECONDS: float = 30.0

    # Row bounds for a single request
    MIN_ROWS: int = 1
    MAX_ROWS: int = 100
    DEFAULT_ROWS: int = 10

    # Mock generation batching
    MOCK_BATCH_THRESHOLD: int = 15  # Batch when rows >= this value
    MOCK_BATCH_SIZE: int = 10
    MOCK_LONG_PROMPT_BATCH_SIZE: int = 5
    LONG_PROMPT_CHARS: int = 200
    MOCK_BATCH_RETRIES: int = 2  # Retries per batch, on top of the first attempt
    MOCK_INTER_BATCH_DELAY_SECONDS: float = 1.0
    TRUNCATED_PROMPT_CHARS: int = 120

    # Request-wide timeout
    REQUEST_TIMEOUT_SECONDS: float = 50.0
    REQUEST_TIMEOUT_PER_BATCH_SECONDS: float = 20.0
    REQUEST_TIMEOUT_MAX_SECONDS: float = 300.0

    # Training/LLM-style prompts are always routed to mock generation
    MOCK_AUTODETECT_KEYWORDS: list = [
        "fine-tune", "fine tune", "finetune", "llm", "training data",
        "instruction", "chatbot", "prompt-response", "conversation dataset",
    ]

    # External data sources
    SOURCE_TIMEOUT_SECONDS: float = 10.0
    NEWSDATA_API_KEY: str = ""
    OPENWEATHER_API_KEY: str = "demo"
    COINGECKO_API_URL: str = "https://api.coingecko.com/api/v3"
    WTTR_API_URL: str = "https://wttr.in"
    NEWSDATA_API_URL: str = "https://newsdata.io/api/1"
    SPORTSDB_API_URL: str = "https://www.thesportsdb.com/api/v1/json/3"
    DATA_GOV_API_URL: str = "https://catalog.data.gov/api/3"
    WORLD_BANK_API_URL: str = "https://api.worldbank.org/v2"
    WHO_GHO_API_URL: str = "https://ghoapi.azureedge.net/api"
    OPENWEATHER_API_URL: str = "https://api.openweathermap.org/data/2.5"
    REST_COUNTRIES_API_URL: str = "https://restcountries.com/v3.1"
    JSON_PLACEHOLDER_API_URL: str = "https://jsonplaceholder.typicode.com"
    RANDOM_USER_API_URL: str = "https://randomuser.me/api"
    WEATHER_CITIES: list = [
        "London", "New York", "Tokyo", "Paris", "Sydney",
        "Dubai", "Singapore", "Mumbai", "Berlin", "Toronto",
    ]

    # Streaming responses
    STREAM_MEDIA_TYPE: str = "text/stream-json"
    STREAM_HEADER: str = "X-Stream-Response"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # CORS Settings
    CORS_ALLOW_ORIGINS: list = ["http://localhost:3000", "http://127.0.0.1:3000"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]

    class Config:
        case_sensitive = True
        frozen = True
        # To load from a .env file
        env_file = ".env"
        env_file_encoding = "utf-8"

    @field_validator("GOOGLE_API_KEY")
    @classmethod
    def _blank_key_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def has_ai_credential(self) -> bool:
        return self.GOOGLE_API_KEY is not None


def get_settings() -> Settings:
    return Settings()
