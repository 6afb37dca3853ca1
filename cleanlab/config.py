import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application configuration from environment variables"""

    # App
    app_name: str = "Clean LAB"
    debug: bool = os.getenv("DEBUG", "True").lower() == "true"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./cleanlab.db")
    db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "10"))

    # Bookings
    slot_capacity: int = int(os.getenv("SLOT_CAPACITY", "3"))
    booking_code_prefix: str = os.getenv("BOOKING_CODE_PREFIX", "CL-")
    booking_code_length: int = int(os.getenv("BOOKING_CODE_LENGTH", "5"))
    booking_code_max_attempts: int = int(os.getenv("BOOKING_CODE_MAX_ATTEMPTS", "10"))

    # Auth
    verification_code_ttl_minutes: int = int(os.getenv("VERIFICATION_CODE_TTL_MINUTES", "30"))
    auth_token_ttl_days: int = int(os.getenv("AUTH_TOKEN_TTL_DAYS", "7"))
    expose_verification_code: bool = os.getenv("EXPOSE_VERIFICATION_CODE", "True").lower() == "true"

    # Admin
    admin_password: str = os.getenv("ADMIN_PASSWORD", "cleanlab2024")

    # Twilio
    twilio_account_sid: str = os.getenv("TWILIO_ACCOUNT_SID", "")
    twilio_auth_token: str = os.getenv("TWILIO_AUTH_TOKEN", "")
    twilio_phone_number: str = os.getenv("TWILIO_PHONE_NUMBER", "")

    # Background jobs
    cleanup_interval_minutes: int = int(os.getenv("CLEANUP_INTERVAL_MINUTES", "15"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "logs/errors.log")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


settings = Settings()
