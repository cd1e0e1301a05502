from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    environment: str = "development"

    # Configuración de la base de datos
    database_url: str = "sqlite:///./storefront.db"
    sql_echo: bool = False
    auto_create_db: bool = True

    # Configuración de la aplicación
    app_name: str = "Storefront API"
    app_version: str = "1.0.0"
    debug: bool = True
    log_level: str = "INFO"

    # Configuración del servidor
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = ["*"]

    # Configuración JWT
    secret_key: str = "your-secret-key-change-this-in-production-make-it-very-long-and-random"
    jwt_algorithm: str = "HS256"
    verification_token_expire_minutes: int = 60
    session_token_expire_minutes: int = 60 * 24
    password_reset_expire_minutes: int = 60
    bcrypt_rounds: int = 12

    # Links que se envían por email
    frontend_url: str = "http://localhost:3000"

    # Email: smtp | console | disabled
    email_backend: str = "console"
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    smtp_use_ssl: bool = False
    smtp_from: Optional[str] = None
    smtp_from_email: Optional[str] = None
    smtp_from_name: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


# Instancia global de configuración
settings = Settings()
