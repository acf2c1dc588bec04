from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DEV: bool = False
    DATABASE_URL: str = "sqlite:///./mileage.db"

    SECRET_KEY: str = "change_me_in_env"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24h

    MEETUPS_PER_PAGE: int = 20
    COMMENTS_PER_PAGE: int = 10

    CORS_ORIGINS: list[str] | str = ["http://localhost:4200", "http://127.0.0.1:4200"]

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # console/json

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True)

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str) and not v.startswith("["):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


settings = Settings()
