from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    anthropic_api_key: str = ""
    model_name: str = "claude-haiku-4-5-20251001"
    max_tokens: int = 2000
    temperature: float = 0.3
    request_timeout: float = 60.0
    max_reviews: int = 50
    min_review_length: int = 20
    heuristic_rules_path: str | None = None
    reports_path: str = "./reports"
    scraper_headless: bool = True
    scraper_timeout: int = 30


settings = Settings()
