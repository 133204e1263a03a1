from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    HOTEL_NAME: str = "D'Hillsview Hotel"
    HOTEL_TIMEZONE: str = "Asia/Manila"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "memory"  # "memory" | "supabase"
    SUPABASE_URL: str | None = None
    SUPABASE_ANON_KEY: str | None = None
    SUPABASE_SETTINGS_ID: int = 1
    STORE_TIMEOUT_SECONDS: float = 10.0

    SNAPSHOT_CACHE_TTL_SECONDS: float = 30.0
    SLOT_ASSIGNMENT_STRATEGY: str = "round_robin"  # "round_robin" | "packed"
    DAY_CELL_WIDTH: int = 40
    TAPE_CHART_MAX_SESSIONS: int = 256

    DEFAULT_PRICES: dict[str, int] = {"single": 180, "deluxe": 320, "family": 420}
    DEFAULT_INVENTORY: dict[str, int] = {"single": 5, "deluxe": 4, "family": 3}


settings = Settings()
