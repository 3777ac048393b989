import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        value = default
    else:
        try:
            value = int(raw)
        except ValueError:
            value = default
    if min_value is not None:
        return max(min_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    app_name: str
    database_url: str
    database_sslmode: str
    sql_echo: bool
    log_level: str
    cors_origins: tuple[str, ...]
    warehouse_label: str
    main_warehouse_name: str
    employee_category_row: int
    expense_document_number: str
    income_document_number: str


settings = Settings(
    app_name=os.getenv("APP_NAME", "Warehouse Inventory API"),
    database_url=os.getenv("DATABASE_URL", "sqlite:///./warehouse.db"),
    database_sslmode=os.getenv("DATABASE_SSLMODE", "require"),
    sql_echo=_env_bool("SQL_ECHO", False),
    log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    cors_origins=tuple(
        origin.strip().rstrip("/")
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
        if origin.strip()
    ),
    warehouse_label=os.getenv("WAREHOUSE_LABEL", "Склад"),
    main_warehouse_name=os.getenv("MAIN_WAREHOUSE_NAME", "Основной склад"),
    employee_category_row=_env_int("EMPLOYEE_CATEGORY_ROW", 2),
    expense_document_number=os.getenv("EXPENSE_DOCUMENT_NUMBER", "000003"),
    income_document_number=os.getenv("INCOME_DOCUMENT_NUMBER", "000012"),
)
