from typing import List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application Information
    app_name: str = Field(default="Exam Session Service")
    app_description: str = Field(
        default="Timed multi-section MCQ examinations with scoring and leaderboards"
    )
    app_version: str = Field(default="1.0.0")
    app_url: str = Field(default="http://localhost:8000")
    frontend_url: str = Field(default="http://localhost:3000")
    debug: bool = Field(default=True)
    production: bool = Field(default=False)
    timezone: str = Field(default="UTC")

    # Database Configuration
    db_connection: str = Field(default="postgresql")
    db_host: str = Field(default="127.0.0.1")
    db_port: int = Field(default=5432)
    db_database: str = Field(default="exam-session")
    db_username: str = Field(default="home")
    db_password: str = Field(default="123")
    database_url: Optional[str] = Field(
        default=None, description="Full SQLAlchemy URL, overrides db_* fields"
    )

    # Cache & Rate Limiting
    cache_driver: str = Field(default="none")  # none | redis
    redis_url: str = Field(default="redis://localhost:6379")
    leaderboard_cache_ttl: int = Field(default=300)
    rate_limit_storage_uri: str = Field(default="memory://")
    default_rate_limit: str = Field(default="200/minute")
    leaderboard_rate_limit: str = Field(default="60/minute")

    # Security Settings
    cors_allowed_origins: List[str] = Field(default=["http://localhost:3000"])
    password_hash_rounds: int = Field(default=12, ge=4, le=31)

    # JWT Configuration
    jwt_secret: str = Field(default="your-secret-key-change-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_user_expiration: int = Field(default=7)
    jwt_admin_expiration: int = Field(default=90)
    jwt_issuer: str = Field(default="Exam Session Service")

    # Logging
    log_level: str = Field(default="info")
    log_file: str = Field(default="logs/app.log")

    # Pagination
    default_page_size: int = Field(default=20)
    max_page_size: int = Field(default=100)

    # Admin Defaults
    admin_default_name: str = Field(default="Super Admin")
    admin_default_email: str = Field(default="admin@example.com")
    admin_default_password: str = Field(default="Admin@123")

    # Full-syllabus section defaults
    full_syllabus_section1_name: str = Field(default="Physics + Chemistry")
    full_syllabus_section1_duration: int = Field(default=90)
    full_syllabus_section1_marks: int = Field(default=1)
    full_syllabus_section1_subjects: List[str] = Field(
        default=["physics", "chemistry"]
    )
    full_syllabus_section2_name: str = Field(default="Maths")
    full_syllabus_section2_duration: int = Field(default=90)
    full_syllabus_section2_marks: int = Field(default=2)
    full_syllabus_section2_subjects: List[str] = Field(default=["maths"])

    # Attempts & Leaderboard
    leaderboard_size: int = Field(default=10)
    auto_submit_enabled: bool = Field(default=True)
    auto_submit_interval_seconds: int = Field(default=5)
    # after deadline + grace a manual submit scores the saved draft instead
    submit_grace_seconds: int = Field(default=5, ge=0)

    # Service client
    client_base_url: str = Field(default="http://localhost:8000")
    client_timeout_seconds: float = Field(default=10.0)
    client_max_retries: int = Field(default=3)
    client_backoff_seconds: float = Field(default=0.5)
    client_tick_seconds: float = Field(default=1.0)

    # ============================
    # Generic comma-separated parser
    # ============================
    @staticmethod
    def _parse_csv(value, default):
        if isinstance(value, str):
            items = [x.strip() for x in value.split(",") if x.strip()]
            return items if items else default
        if isinstance(value, list):
            return value
        return default

    @field_validator("cors_allowed_origins", mode="before")
    def validate_cors(cls, v):
        return cls._parse_csv(v, ["http://localhost:3000"])

    @field_validator("full_syllabus_section1_subjects", mode="before")
    def validate_section1_subjects(cls, v):
        return cls._parse_csv(v, ["physics", "chemistry"])

    @field_validator("full_syllabus_section2_subjects", mode="before")
    def validate_section2_subjects(cls, v):
        return cls._parse_csv(v, ["maths"])

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return "postgresql+psycopg2://{user}:{password}@{host}:{port}/{database}".format(
            user=self.db_username,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
        )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_settings():
    try:
        settings = Settings()
        print("✅ Settings loaded successfully!")
        return settings
    except ValidationError as e:
        print("❌ Validation Error:", e)
        raise


settings = load_settings()
