# File: /taskviews/core/config.py | Version: 1.0 | Title: Central Settings (Pydantic v2)
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Database (view-state service) ---
    DATABASE_URL: str = "sqlite:///./taskviews.db"

    # --- Upstream dashboard REST API ---
    API_BASE_URL: str = "http://localhost:5000"
    API_TOKEN: str = ""
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # --- Views / locator behavior ---
    DEFAULT_PARTITION: str = "execution"
    PARTITIONS: List[str] = [
        "execution",
        "receivedVerification",
        "issuedVerification",
        "guidance",
        "completed",
    ]
    HIGHLIGHT_SECONDS: float = 5.0
    LOCATOR_READY_TIMEOUT_SECONDS: float = 30.0

    # Dashboards allowed to persist view state
    VALID_STORE_KEYS: List[str] = [
        "adminDashboard",
        "receivedTasks",
        "assignedTasks",
        "billedTasks",
        "unbilledTasks",
        "costManagement",
        "costManagementBilled",
        "costManagementUnbilled",
        "costManagementCompletedBilled",
        "costManagementCompletedUnbilled",
    ]

    # --- API behavior toggles ---
    ENABLE_STD_ERRORS: bool = (
        False  # set True in .env to enable standardized error responses
    )

    # --- Observability ---
    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
