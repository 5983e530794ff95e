import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./billing.db")
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Tariff codes of the daily base service
    BASE_PRICE_CODE = data.get("BASE_PRICE_CODE", "day_service_basic")
    BASE_SERVICE_CODE = str(data.get("BASE_SERVICE_CODE", "151111"))

    # Rounding per billing step (half_up or truncate)
    ROUNDING_LINE_TOTAL = data.get("ROUNDING_LINE_TOTAL", "half_up")
    ROUNDING_UNIT_CONVERSION = data.get("ROUNDING_UNIT_CONVERSION", "truncate")
    ROUNDING_EXCESS_CONVERSION = data.get("ROUNDING_EXCESS_CONVERSION", "truncate")
    ROUNDING_INSURED_COPAYMENT = data.get("ROUNDING_INSURED_COPAYMENT", "half_up")
    ROUNDING_IMPROVEMENT_UNITS = data.get("ROUNDING_IMPROVEMENT_UNITS", "half_up")

    # Monthly invoice generation
    GENERATION_CONFLICT_RETRIES = int(data.get("GENERATION_CONFLICT_RETRIES", 1))
    GENERATION_CONCURRENCY = int(data.get("GENERATION_CONCURRENCY", 1))
    DEFAULT_GENERATION_MODE = data.get("DEFAULT_GENERATION_MODE", "replace")
