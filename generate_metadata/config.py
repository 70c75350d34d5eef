from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

from generate_metadata.constants import LOCAL_API_BASE_URL, PRODUCTION_API_BASE_URL

load_dotenv()


class Settings(BaseSettings):
    # Site settings
    dsn: str | None = None
    api_key: str | None = None

    # Webhook settings
    webhook_secret: str | None = None

    # Runtime settings
    debug: bool = False
    node_env: str = "production"
    api_base_url: str | None = None
    request_timeout: float = 10.0

    model_config = SettingsConfigDict(
        env_prefix="GENERATE_METADATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def base_url(self) -> str:
        """API base URL, honouring an explicit override before the environment switch."""
        if self.api_base_url:
            return self.api_base_url.rstrip("/")
        if self.node_env == "local":
            return LOCAL_API_BASE_URL
        return PRODUCTION_API_BASE_URL


settings = Settings()
