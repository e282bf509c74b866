from __future__ import annotations

import os
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env for external configuration (log level, API URL, input limits)
load_dotenv()


class DnCConfig(BaseModel):
    """
    Process-wide settings for the API, the UI and the dev launcher.

    Notes:
    - Engines take no configuration; these only bound what the HTTP layer
      accepts and how it logs.
    """
    log_level: str = Field(default_factory=lambda: os.getenv("DNC_LOG_LEVEL", "INFO"))
    api_url: str = Field(default_factory=lambda: os.getenv("API_URL", "http://127.0.0.1:8000"))

    # where dev_up.py binds the two processes
    api_host: str = Field(default_factory=lambda: os.getenv("API_HOST", "127.0.0.1"))
    api_port: int = Field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))
    ui_port: int = Field(default_factory=lambda: int(os.getenv("UI_PORT", "8501")))

    # input limits enforced by the API
    max_points: int = Field(default_factory=lambda: int(os.getenv("DNC_MAX_POINTS", "5000")))
    max_digits: int = Field(default_factory=lambda: int(os.getenv("DNC_MAX_DIGITS", "200")))

    def client_host(self) -> str:
        # 0.0.0.0 is a bind address; clients on this host connect via loopback
        return "127.0.0.1" if self.api_host in ("0.0.0.0", "0") else self.api_host

    def local_api_url(self) -> str:
        return f"http://{self.client_host()}:{self.api_port}"


DEFAULT_CONFIG = DnCConfig()
