"""Engine configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings

from colorjong.logic.enums import BatchMode


class EngineSettings(BaseSettings):
    model_config = {"env_prefix": "COLORJONG_"}

    draw_delay_seconds: float = Field(default=0.3, ge=0)
    ai_delay_seconds: float = Field(default=0.5, ge=0)
    batch_step_delay_seconds: float = Field(default=0.0, ge=0)
    log_dir: str = Field(default="logs/colorjong", min_length=1)
    default_batch_mode: BatchMode = BatchMode.WINS
    default_target: int = Field(default=100, ge=1)
