from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql://postgres:postgres@db:5432/inkwell"
    redis_url: str = "redis://redis:6379/0"

    log_level: str = "INFO"

    # Base URL of the dashboard, used to build accept-invite links
    frontend_url: str = "http://localhost:3000"

    # Invitations
    invite_expiry_days: int = 7

    # Outbound mail
    mail_enabled: bool = False
    mail_from: str = "Inkwell <no-reply@inkwell.local>"
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    smtp_timeout: int = 30

    # Auth settings
    session_cookie_name: str = "inkwell_session"
    session_max_age: int = 86400 * 7  # 7 days
    session_cookie_secure: bool = False  # True in production

    class Config:
        env_file = ".env"


settings = Settings()
