from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # OpenRouter
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    dive_model: str = "openai/gpt-5-mini"
    app_referer: str = "https://tekir.co"
    app_title: str = "Tekir"
    synthesis_max_tokens: int = 400
    synthesis_temperature: float = 0.3

    # Page fetching
    fetch_timeout_ms: int = 3000
    fetch_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    min_content_chars: int = 100
    extractor_max_chars: int = 2000
    prompt_source_chars: int = 1000

    # Two-phase acquisition
    target_pages: int = 2
    max_concurrent_fetches: int = 4
    overfetch_factor: int = 2

    # Session gate / rate limits
    session_gate_enabled: bool = False
    session_tokens: str = ""  # comma-separated tokens accepted by the in-memory gate
    anonymous_daily_limit: int = 150
    authenticated_daily_limit: int = 300
    plus_daily_limit: int = 600

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_to_file: bool = False
    log_dir: str = "logs"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]


settings = Settings()
