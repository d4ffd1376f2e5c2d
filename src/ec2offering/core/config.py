# src/ec2offering/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_ONDEMAND_URL = (
    "https://raw.githubusercontent.com/kenklin/awsec2offering/master/"
    "src/main/resources/aws-ec2-ondemand.json"
)


class Settings(BaseSettings):
    # App
    app_name: str = "EC2 Offering API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = Field(default=["*"])

    # Rate Limiting
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60

    # Offering Cache: der komplette Cache wird nach Ablauf geleert
    cache_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0)

    # On-Demand Preisdokument
    ondemand_url: str = _DEFAULT_ONDEMAND_URL
    ondemand_timeout_seconds: float = 15.0

    # AWS: ohne explizite Keys greift die boto3 Credential-Chain (Env-Vars, Profile, IMDS)
    aws_region: str = "us-east-1"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None

    # URI Defaults
    default_availability_zone: str = "us-east-1a"
    default_product_description: str = "linux"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
