# socialgraph/core/config.py

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./socialgraph.db"

    # Sessions are issued elsewhere; we only verify them
    SECRET_KEY: str = "CHANGE_THIS_TO_A_SUPER_SECRET_KEY"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # OTP vendor (Vonage Verify)
    VONAGE_API_KEY: str = ""
    VONAGE_API_SECRET: str = ""
    VONAGE_BASE_URL: str = "https://api.nexmo.com"
    VONAGE_BRAND: str = "FastTrack"
    VONAGE_CODE_LENGTH: int = 6

    # Push vendor (Expo)
    EXPO_PUSH_URL: str = "https://exp.host/--/api/v2/push/send"

    VENDOR_TIMEOUT_SECONDS: float = 10.0

    # Contact lookup limits
    LOOKUP_MAX_HASHES: int = 1000
    LOOKUP_QUERY_CHUNK: int = 500

    NOTIFICATION_PAGE_SIZE: int = 50

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        """
        Values come from the process environment first, then from .env
        in the working directory.
        """
        env_file = ".env"


settings = Settings()
