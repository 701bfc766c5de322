from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    database_url: str = "postgresql+psycopg://app:app@db:5432/taskhub"
    redis_url: str = "redis://redis:6379/0"

    jwt_secret: str = "dev-secret-change-me"
    jwt_issuer: str = "taskhub-api"
    jwt_audience: str = "taskhub-api"
    jwt_expires_minutes: int = 60 * 24 * 7

    bcrypt_rounds: int = 12

    # rate limiting (redis)
    rate_limit_enabled: bool = True
    rate_limit_register_per_min: int = 10
    rate_limit_login_per_min: int = 30

    # never enable in prod, 500s would leak exception text
    expose_error_details: bool = False

settings = Settings()
