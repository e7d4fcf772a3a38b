from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "web-app-template"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite+pysqlite:///./web_app_template.db"

    CORS_ORIGINS: str = "http://localhost:5173,https://localhost:60534"

    DEFAULT_LANGUAGE: str = "es-MX"
    SUPPORTED_LANGUAGES: str = "es-MX,en-US"

    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 500

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def supported_languages_list(self) -> List[str]:
        return [lang.strip() for lang in self.SUPPORTED_LANGUAGES.split(",") if lang.strip()]

settings = Settings()
