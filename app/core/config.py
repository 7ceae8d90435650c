import json
from functools import cached_property
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.scheduling.dates import parse_time
from app.scheduling.models import ServiceProvider, WorkingHours

# Resolve .env from the project root so it loads regardless of cwd
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"

_DEFAULT_PROVIDERS = json.dumps([
    {"id": "santi", "name": "Santuu", "slot_interval_minutes": 30, "description": "Corte clásico y moderno"},
    {"id": "mili", "name": "Mili", "slot_interval_minutes": 45, "description": "Coloración y estilismo"},
])


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str

    # JWT
    secret_key: str
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7
    algorithm: str = "HS256"

    # CORS
    cors_origins: str = "http://localhost:5173"

    # Shop hours and barbers. Validated when settings load, so a bad interval
    # or an inverted window stops the app at startup.
    business_start: str = "10:00"
    business_end: str = "20:00"
    providers_json: str = _DEFAULT_PROVIDERS
    # Zone used for "now" when deciding which of today's slots are past
    timezone: str = "America/Argentina/Buenos_Aires"

    # Booking rules
    deposit_percentage: int = 50
    reminder_hours_before: int = 2

    # Env
    env: str = "development"

    # Email (SMTP). Leave smtp_host empty to disable sending.
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    from_email: str = ""
    from_name: str = "Piso Style BarberShop"
    # Branding and contact
    site_name: str = "Piso Style BarberShop"
    shop_address: str = "Jujuy 1442, Mar del Plata"
    admin_phone: str = "2233540664"
    # Bank transfer details shown when a deposit is due
    transfer_alias: str = "TURNO.STYLE"
    transfer_account_holder: str = "santiago martin tejada"
    transfer_bank: str = "naranja digital"

    @field_validator("deposit_percentage")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("business_start", "business_end")
    @classmethod
    def _valid_time(cls, v: str) -> str:
        parse_time(v)
        return v

    @field_validator("providers_json")
    @classmethod
    def _valid_providers(cls, v: str) -> str:
        providers = [ServiceProvider(**p) for p in json.loads(v)]
        ids = [p.id for p in providers]
        if len(ids) != len(set(ids)):
            raise ValueError("provider ids must be unique")
        return v

    @model_validator(mode="after")
    def _valid_window(self) -> "Settings":
        WorkingHours(
            start_of_day=parse_time(self.business_start),
            end_of_day=parse_time(self.business_end),
        )
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password and self.from_email)

    @cached_property
    def working_hours(self) -> WorkingHours:
        return WorkingHours(
            start_of_day=parse_time(self.business_start),
            end_of_day=parse_time(self.business_end),
        )

    @cached_property
    def providers(self) -> dict[str, ServiceProvider]:
        return {p["id"]: ServiceProvider(**p) for p in json.loads(self.providers_json)}


settings = Settings()
