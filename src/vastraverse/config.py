import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv


DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str = "") -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class DatabaseConfig:
    """Database configuration settings"""
    url: str = "sqlite:///vastraverse.db"
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 3600
    echo: bool = False  # Log SQL queries


@dataclass
class SecurityConfig:
    """Security-related configuration"""
    jwt_secret_key: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expiration_days: int = 7
    bcrypt_rounds: int = 12
    admin_emails: List[str] = field(default_factory=list)


@dataclass
class APIConfig:
    """API-specific configuration"""
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    max_page_size: int = 100
    receipt_timezone: str = "Asia/Kolkata"


@dataclass
class AppConfig:
    """Application configuration"""
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000
    environment: str = "development"  # development, staging, production, testing
    log_level: str = "INFO"


@dataclass
class Config:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    api: APIConfig = field(default_factory=APIConfig)
    app: AppConfig = field(default_factory=AppConfig)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "Config":
        load_dotenv(dotenv_path)

        return cls(
            database=DatabaseConfig(
                url=os.getenv("DATABASE_URL", "sqlite:///vastraverse.db"),
                pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
                max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "20")),
                pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", "30")),
                pool_recycle=int(os.getenv("DB_POOL_RECYCLE", "3600")),
                echo=_env_bool("DB_ECHO"),
            ),
            security=SecurityConfig(
                jwt_secret_key=os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET),
                jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
                jwt_expiration_days=int(os.getenv("JWT_EXPIRATION_DAYS", "7")),
                bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
                admin_emails=[e.lower() for e in _env_list("ADMIN_EMAILS")],
            ),
            api=APIConfig(
                cors_origins=_env_list("CORS_ORIGINS", "*"),
                max_page_size=int(os.getenv("MAX_PAGE_SIZE", "100")),
                receipt_timezone=os.getenv("RECEIPT_TIMEZONE", "Asia/Kolkata"),
            ),
            app=AppConfig(
                debug=_env_bool("DEBUG"),
                host=os.getenv("HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "5000")),
                environment=os.getenv("ENVIRONMENT", "development"),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
            ),
        )

    @property
    def is_production(self) -> bool:
        return self.app.environment == "production"

    def validate(self) -> None:
        """Validate critical configuration"""
        if self.is_production and self.security.jwt_secret_key == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be set in production")

        if not self.database.url:
            raise ValueError("DATABASE_URL is required")
