from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="UMI_OCR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    base_url: str = Field(default="http://127.0.0.1:1224")
    timeout: float = Field(default=30.0)

    # App
    log_level: str = Field(default="INFO")

    # Document job polling (CLI)
    poll_interval: float = Field(default=1.0)
    poll_timeout: float = Field(default=600.0)

    def endpoint(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
