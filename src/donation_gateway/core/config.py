from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):

    # Secrets default to blank: a missing value fails on first use at Stripe/SMTP
    STRIPE_SECRET_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""

    PRICE_ID_5: str = ""
    PRICE_ID_25: str = ""
    PRICE_ID_50: str = ""
    PRICE_ID_92: str = ""

    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_VERIFY_ON_STARTUP: bool = True
    EMAIL_USERNAME: str = ""
    EMAIL_PASSWORD: str = ""
    MAIL_FROM_NAME: str = "Free Quran"
    SITE_NAME: str = "FreeQuran.store"
    ADMIN_EMAIL: str = ""

    CLIENT_URL: str = ""
    PORT: int = 5000
    ROOT_PATH: str = ""
    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def price_ids(self) -> dict[int, str]:
        """Donation tiers in cents mapped to their recurring Stripe price ids."""
        return {
            500: self.PRICE_ID_5,
            2500: self.PRICE_ID_25,
            5000: self.PRICE_ID_50,
            9200: self.PRICE_ID_92,
        }

@lru_cache()
def get_settings() -> Settings:
    return Settings()
