## formstamp/core/config.py

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for the application
    """

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", case_sensitive=False
    )

    environment: str = "development"
    allowed_cors_urls: str = "*"

    database_url: str = ""
    db_host: str = "localhost"
    db_user: str = "formstamp"
    db_password: str = ""
    db_database: str = "formstamp"
    db_port: int = 3306

    storage_backend: str = "local"
    storage_dir: str = "storage"
    template_prefix: str = "templates"

    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: Optional[str] = None
    s3_bucket_name: Optional[str] = None

    allowed_file_types: str = "pdf"
    allowed_file_size: int = 20480

    default_font_name: str = "Helvetica"
    default_font_size: float = 12.0
    archive_compression_level: int = 9

    generate_timeout_base_seconds: float = 30.0
    generate_timeout_per_company_seconds: float = 5.0

    log_level: str = "INFO"
    log_json: bool = False
    log_file: Optional[str] = None

    @property
    def async_db_url(self) -> str:
        """
        Async database URL
        """
        if self.database_url:
            return self.database_url
        return f"mysql+asyncmy://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_database}"

    @property
    def is_production(self) -> bool:
        """
        Whether the service runs in production
        """
        return self.environment.lower() == "production"


settings = Settings()


def get_settings() -> Settings:
    """
    Dependency returning the application settings
    """
    return settings
