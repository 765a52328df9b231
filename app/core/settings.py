from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class Env(str, Enum):
    DEV = "dev"
    HML = "hml"
    PROD = "prod"


class Settings(BaseSettings):
    APP_ENV: Env = Env.DEV
    DEBUG: bool = False

    DATABASE_URL: str

    ALLOWED_HOSTS: str = "localhost,127.0.0.1"

    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"

    # Reglas de agenda (los valores por defecto son los de la barbería)
    BUSINESS_TIMEZONE: str = "America/Bogota"
    SLOT_STRIDE_MINUTES: int = 15
    LEAD_TIME_MINUTES: int = 60
    PHONE_DEFAULT_REGION: str = "CO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        ser_json_timedelta="iso8601",
        ser_json_tz="utc",
        extra="ignore",
    )


# instancia global
settings = Settings()
