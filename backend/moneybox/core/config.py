from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Moneybox Product Explorer"
    DATA_FILE: Path = Path("data/products.json")
    UPLOAD_DIR: Path = Path("uploads")
    MAX_UPLOAD_SIZE_MB: int = 5

    # Sliding window per client IP (15 minutes)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW_SECONDS: int = 900
    RATE_LIMIT_GENERAL: int = 100
    RATE_LIMIT_WRITE: int = 20

    CORS_ORIGINS: list[str] = ["*"]  # TODO: restrict to the admin frontend origin
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3002

    class Config:
        env_file = ".env"


settings = Settings()
