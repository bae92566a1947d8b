from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from pathlib import Path

class Settings(BaseSettings):
    app_name: str = Field(default="Spotix API", alias="APP_NAME")
    env: str = Field(default="dev", alias="ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    # Raw env value (string), parsed to a list via property to avoid JSON decoding errors
    cors_origins_raw: Optional[str] = Field(default=None, alias="CORS_ORIGINS", description="Comma or space separated list of allowed CORS origins")

    # Payment gateway
    paystack_secret_key: Optional[str] = Field(default=None, alias="PAYSTACK_SECRET_KEY")
    paystack_base_url: str = Field(default="https://api.paystack.co", alias="PAYSTACK_BASE_URL")
    app_url: str = Field(default="http://localhost:5173", alias="APP_URL", description="Base URL the gateway redirects to after checkout")

    # Generative text
    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-1.5-pro", alias="GEMINI_MODEL")

    # Email / notification providers
    mailersend_api_key: Optional[str] = Field(default=None, alias="MAILERSEND_API_KEY")
    mailjet_public_key: Optional[str] = Field(default=None, alias="MJ_APIKEY_PUBLIC")
    mailjet_private_key: Optional[str] = Field(default=None, alias="MJ_APIKEY_PRIVATE")

    # Auxiliary functions called after a ticket is issued (skipped when unset)
    atomic_function_url: Optional[str] = Field(default=None, alias="ATOMIC_FUNCTION_URL")
    analytics_function_url: Optional[str] = Field(default=None, alias="ANALYTICS_FUNCTION_URL")

    # Payment-status poll used by the paid ticket route
    payment_poll_attempts: int = Field(default=3, alias="PAYMENT_POLL_ATTEMPTS", ge=1)
    payment_poll_delay_seconds: float = Field(default=2.0, alias="PAYMENT_POLL_DELAY_SECONDS", ge=0)
    payment_poll_backoff: float = Field(default=1.0, alias="PAYMENT_POLL_BACKOFF", ge=1.0)

    webhook_require_ticket_purchase: bool = Field(default=True, alias="WEBHOOK_REQUIRE_TICKET_PURCHASE")
    outbound_timeout_seconds: float = Field(default=10.0, alias="OUTBOUND_TIMEOUT_SECONDS", gt=0)

    class Config:
        # Load env from backend/.env regardless of CWD
        env_file = str(Path(__file__).resolve().parents[2] / ".env")
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"

    def _parse_list(self, v: Optional[str]) -> List[str]:
        if v is None:
            return []
        s = v.strip()
        if not s:
            return []
        if s.startswith("[") and s.endswith("]"):
            try:
                import json
                loaded = json.loads(s)
                if isinstance(loaded, list):
                    return [str(e).strip() for e in loaded if str(e).strip()]
            except ValueError:
                pass
        return [e.strip() for e in s.replace(" ", ",").split(",") if e.strip()]

    @property
    def cors_origins(self) -> List[str]:
        items = self._parse_list(self.cors_origins_raw)
        # Fallback dev defaults if none provided
        if not items:
            return ["http://localhost:5173", "http://127.0.0.1:5173"]
        # Dev convenience: ensure both localhost and 127.0.0.1 variants for same ports
        augmented = set(items)
        for origin in items:
            if origin.startswith("http://localhost:"):
                augmented.add("http://127.0.0.1:" + origin.rsplit(":", 1)[1])
            if origin.startswith("http://127.0.0.1:"):
                augmented.add("http://localhost:" + origin.rsplit(":", 1)[1])
        return sorted(augmented)

settings = Settings()  # type: ignore


def get_settings() -> Settings:
    """Dependency hook; tests override it with their own Settings instance."""
    return settings
