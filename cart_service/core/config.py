from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB Configuration
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "cart_db"

    # Application Settings
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    API_V1_PREFIX: str = "/api"
    PROJECT_NAME: str = "Cart Service"
    LOG_LEVEL: str = "INFO"

    # Order hand-off
    EVENT_PUBLISHER_MODE: str = "SIMULATION"  # SIMULATION | HTTP
    ORDER_SERVICE_URL: str = "http://localhost:8082"
    ORDER_EVENTS_EXCHANGE: str = "cart.events"
    ORDER_PLACED_ROUTING_KEY: str = "order.placed"
    PUBLISH_TIMEOUT_SECONDS: float = 5.0

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


settings = Settings()
