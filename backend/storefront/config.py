from pydantic_settings import BaseSettings

DEFAULT_SECRET_KEY = "change-me-in-production"


class Settings(BaseSettings):
    database_url: str = "sqlite:///storefront.db"
    secret_key: str = DEFAULT_SECRET_KEY
    token_algorithm: str = "HS256"
    token_expire_minutes: int = 60  # 0 disables expiry
    bcrypt_rounds: int = 10
    host: str = "0.0.0.0"
    port: int = 5000
    admin_username: str | None = None
    admin_password: str | None = None
    static_dir: str | None = None

    class Config:
        env_prefix = "STOREFRONT_"
        frozen = True


settings = Settings()
