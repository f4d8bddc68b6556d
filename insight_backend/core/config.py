from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List, Optional

DEFAULT_MAILGUN_API_BASE = "https://api.mailgun.net/v3"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Mailgun - sending is disabled unless both key and domain are set
    mailgun_api_key: Optional[str] = None
    mailgun_domain: Optional[str] = None
    mailgun_api_base: str = DEFAULT_MAILGUN_API_BASE
    mail_timeout: float = 10.0

    # Addresses
    company_email: Optional[str] = None  # Overrides the synthesized "from" address
    company_name: str = "Insight RTLS"
    contact_email: Optional[str] = None  # Internal recipient for notifications

    # CORS settings (comma separated)
    frontend_url: str = "http://localhost:5173"

    port: int = 3000
    log_level: str = "INFO"

    @property
    def allowed_origins(self) -> List[str]:
        return [o.strip() for o in self.frontend_url.split(",") if o.strip()]

    @property
    def effective_from_address(self) -> str:
        """Get the "from" address: COMPANY_EMAIL, or a noreply on the Mailgun domain"""
        if self.company_email:
            return self.company_email
        return f"{self.company_name} <noreply@{self.mailgun_domain or ''}>"


@lru_cache
def get_settings():
    return Settings()
