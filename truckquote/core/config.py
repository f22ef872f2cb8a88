from typing import Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./truckquote.db"

    REDIS_URL: Optional[str] = None

    SECRET_KEY: str = "change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours

    RATE_LIMIT: int = 100
    RATE_LIMIT_WINDOW: int = 600  # 10 minutes

    IDEMPOTENCY_TTL: int = 300  # 5 minutes

    GOOGLE_MAPS_API_KEY: Optional[str] = None
    DISTANCE_MATRIX_URL: str = "https://maps.googleapis.com/maps/api/distancematrix/json"
    DISTANCE_LOOKUP_TIMEOUT: float = 10.0  # seconds, per leg

    WEBHOOK_URL: Optional[str] = None
    WEBHOOK_TIMEOUT: int = 10
    WEBHOOK_RETRIES: int = 3

    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_BACKEND: str = "redis://localhost:6379/2"

    # Seed values for the rate configuration row
    DEFAULT_DEPOT_ADDRESS: str = "9 Main Road, Klapmuts, Cape Town, South Africa"
    DEFAULT_DEPOT_LAT: float = -33.8567
    DEFAULT_DEPOT_LNG: float = 18.8086
    DEFAULT_TRUCK_RATE_PER_KM: float = 10.0
    DEFAULT_DRIVER_RATE_PER_8H: float = 400.0
    DEFAULT_EXTRA_HOUR_RATE: float = 500.0
    DEFAULT_VAT_PERCENT: float = 15.0

    API_TITLE: str = "Truck Quote Service"
    API_DESCRIPTION: str = "Delivery quotes priced from depot-to-depot driving legs"
    API_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
