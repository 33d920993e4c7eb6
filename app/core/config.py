from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.schemas.instance import Instance

DEFAULT_INSTANCES = [
    Instance(id="usa", name="United States", url="https://usa-api.dive25.com/health"),
    Instance(id="fra", name="France", url="https://fra-api.dive25.com/health"),
    Instance(id="gbr", name="United Kingdom", url="https://gbr-api.dive25.com/health"),
    Instance(id="deu", name="Germany", url="https://deu-api.prosecurity.biz/health"),
]


class AppSettings(BaseSettings):
    app_name: str = "Instance-Status"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Fake instance
    fake_instance_host: str = "0.0.0.0"
    fake_instance_port: int = 8001
    fake_instance_status_code: int = 200
    fake_instance_delay_ms: int = 0

    # Feature toggles
    metrics_enabled: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Registry
    instances: list[Instance] = DEFAULT_INSTANCES
    instances_file: str | None = None  # JSON list of {id, name, url}, overrides `instances`

    # Probes
    probe_timeout_ms: int = 5000  # Total budget per probe, connect + read
    probe_user_agent: str = "DIVE25-Status-Checker/1.0"
    probe_max_connections: int = 20

    # Cache
    cache_ttl: int = 30  # seconds
    cache_key: str = "/status"

    model_config = SettingsConfigDict(env_prefix="STATUS_", env_file=".env", env_file_encoding="utf-8")

    @field_validator("probe_timeout_ms", "cache_ttl")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value


# Load settings
settings = AppSettings()
