from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./counselor.db"
    environment: str = "development"
    log_level: str = "INFO"

    # Catalog service consulted by the optimizer for prerequisite metadata
    catalog_api_url: str = "http://localhost:8000"
    catalog_timeout_seconds: float = 10.0
    catalog_fetch_limit: int = 5000

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
