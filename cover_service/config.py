"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from typing import List, Optional

from cover_service.generation.models import PollBudget


class Settings(BaseSettings):
    # Remote generation API
    suno_base_url: str = "https://api.sunoapi.org/api/v1"
    suno_api_key: str = ""
    remote_profile: str = "record_info"  # "record_info", "clips" or "success_flag"
    http_timeout_seconds: float = 30.0

    # Generation parameters
    cover_style: str = "Piano Solo, Faithful, No Improvisation"
    cover_title: str = "Piano Cover"
    cover_model: str = "V4"
    custom_mode: bool = True
    instrumental: bool = True
    audio_weight: Optional[float] = 0.9

    # Uploads and generated covers share one directory
    upload_dir: str = "uploads"
    max_upload_bytes: int = 50 * 1024 * 1024

    # Polling (5s x 120 = 10 minutes)
    poll_interval_seconds: float = 5.0
    poll_max_attempts: int = 120

    # Public reachability
    public_base_url: Optional[str] = None
    use_request_host: bool = False

    # Server
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def poll_budget(self) -> PollBudget:
        return PollBudget(
            interval_seconds=self.poll_interval_seconds,
            max_attempts=self.poll_max_attempts,
        )


settings = Settings()
