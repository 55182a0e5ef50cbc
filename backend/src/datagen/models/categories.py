from enum import Enum


class DataCategory(str, Enum):
    """Domains a free-text request can be routed to on the real-data path."""

    FINANCE = "finance"
    WEATHER = "weather"
    NEWS = "news"
    CRYPTO = "crypto"
    SPORTS = "sports"
    GOVERNMENT = "government"
    EDUCATION = "education"
    HEALTH = "health"
    ENVIRONMENT = "environment"
    DEMOGRAPHICS = "demographics"
    TRANSPORTATION = "transportation"
    ECONOMICS = "economics"
    ML_DATASETS = "ml_datasets"
    AI_TRAINING = "ai_training"
    COMPUTER_VISION = "computer_vision"
    NLP_DATASETS = "nlp_datasets"
    GENERAL = "general"


class DataType(str, Enum):
    MOCK = "mock"
    REAL = "real"


class DownloadFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
    EXCEL = "excel"
