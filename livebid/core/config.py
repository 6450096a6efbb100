from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    secret_key: str
    algorithm: str = "HS256"
    # Unset means tokens carry no exp claim
    access_token_expire_minutes: int | None = None
    database_url: str = "sqlite+aiosqlite:///:memory:"
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    log_json: bool = False

    class Config:
        env_file = ".env"

settings = Settings()
