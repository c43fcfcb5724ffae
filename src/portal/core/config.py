from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Portal"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Security
    log_user_emails: bool = False  # GDPR: keep off in production
    csp_production: str = "default-src 'self'; frame-ancestors 'none'"

    # Database
    database_url: str
    database_migrations_url: str | None = None  # DDL-capable role for Alembic
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full

    # Shutdown
    shutdown_grace_period: int = 30

    # Auth
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7
    email_verification_expire_hours: int = 24
    invite_expire_days: int = 7
    skip_email_verification: bool = False
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Env var encryption (falls back to jwt_secret_key when unset)
    encryption_key: str | None = None
    encryption_kdf_iterations: int = 100_000

    # Subscription tiers
    free_tier_max_projects: int = 1
    free_tier_max_team_members: int = 1
    paid_tier_max_projects: int = 10
    paid_tier_max_team_members: int = 10

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Email (Resend)
    resend_api_key: str | None = None  # If not set, emails are logged but not sent
    email_from: str = "noreply@example.com"
    email_send_timeout_seconds: int = 10
    app_url: str = "http://localhost:3000"

    # Redis (optional - app works without it)
    redis_url: str | None = None
    redis_pool_size: int = 10

    # Rate limiting
    rate_limit_key_prefix: str = "rl"
    global_rate_limit_per_second: int = 10
    global_rate_limit_burst: int = 20

    # Maintenance scripts
    verify_user_email: str = "admin@example.com"

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "JWT_SECRET_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Reject wildcard origins, credentials are always allowed."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @property
    def effective_encryption_key(self) -> str:
        """Key material used to derive env var encryption keys."""
        return self.encryption_key or self.jwt_secret_key

    def tier_limits(self, tier: str) -> tuple[int, int]:
        """Return (max_projects, max_team_members) for a subscription tier."""
        if tier == "paid":
            return self.paid_tier_max_projects, self.paid_tier_max_team_members
        return self.free_tier_max_projects, self.free_tier_max_team_members


@lru_cache
def get_settings() -> Settings:
    return Settings()
