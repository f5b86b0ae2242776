from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent
TEMPLATE_DIR = PACKAGE_DIR / "templates"


class Settings(BaseSettings):
    database_url: str = "sqlite+pysqlite:///./fuel_billing.db"
    secret_key: str = "change-me"
    debug: bool = False
    log_level: str = "INFO"

    station_name: str = "CSD Filling Station"
    station_address: str = "Cantonment, Dhaka-1206"
    invoice_logo_path: str | None = None

    min_invoice_year: int = 2000
    max_invoice_year: int = 2050
    orders_per_page: int = 25
    invoices_per_page: int = 15

    model_config = SettingsConfigDict(env_file=".env", env_prefix="")


settings = Settings()
