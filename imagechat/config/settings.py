from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    server_host: str = "127.0.0.1"
    server_port: int = 8000

    transport_provider: str = "httpx"
    api_key: str = ""
    api_base_url: str = "https://oaiapi.asia/v1"
    request_timeout_seconds: int = 120

    image_model: str = "gemini-2.5-flash-image"
    chat_model: str = "gemini-2.5-flash"
    chat_temperature: float = 0.7
    chat_top_p: float = 0.9
    chat_max_tokens: int = 4000
    max_batch_size: int = 5

    history_path: str = ""
    history_budget_bytes: int = 5 * 1024 * 1024
    history_soft_threshold_bytes: int = 4 * 1024 * 1024
    history_keep_recent: int = 30
    history_fallback_keep: int = 20
