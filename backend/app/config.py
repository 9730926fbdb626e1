from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Skill Share Map"
    app_env: str = "dev"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = Field(default=5000, validation_alias=AliasChoices("port", "skillshare_port"))

    database_url: str = Field(default="sqlite:///./skillshare.db")
    cors_origins: list[str] = Field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ])

    jwt_secret: str = "change-me-in-prod-skillshare-signing-key"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    seed_sample_skills: bool = True


settings = Settings()
