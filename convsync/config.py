from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    # Session boundaries
    idle_threshold_seconds: float = 30.0
    idle_check_interval_ms: int = 1000

    # Mic activity sampling
    poll_mic_interval_ms: int = 100
    mic_sample_window_ms: int = 300
    mic_activity_threshold: float = 1.0
    mic_fetch_timeout_seconds: float = 2.0

    # Transcript polling
    initial_poll_interval_ms: int = 5000
    max_poll_interval_ms: int = 20000
    transcript_duration_seconds: int = 7200  # long capture window (2 hours)
    fetch_timeout_seconds: float = 30.0

    # Capture gates at startup
    audio_enabled: bool = True
    sleeping: bool = False

    # Capture service
    capture_service_url: str = "http://localhost:8765"

    # Server
    server_host: str = "0.0.0.0"
    server_port: int = 8080
    log_level: str = "INFO"

    model_config = {"env_prefix": "CONVSYNC_", "case_sensitive": False}

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value

    @model_validator(mode="after")
    def _check_poll_bounds(self) -> "Settings":
        if self.initial_poll_interval_ms <= 0:
            raise ValueError("initial_poll_interval_ms must be positive")
        if self.max_poll_interval_ms < self.initial_poll_interval_ms:
            raise ValueError("max_poll_interval_ms must be >= initial_poll_interval_ms")
        return self


settings = Settings()
