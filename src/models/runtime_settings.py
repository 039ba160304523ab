"""
Runtime settings - the `runtime:` section of the configuration
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from models.enums import LogLevel


class RuntimeSettings(BaseModel):
    """Process-wide knobs of the effects runtime"""
    fps: int = Field(60, ge=1, le=240, description="Frame rate of the asyncio frame clock")
    log_level: str = Field("INFO", description="Minimum console log level")
    use_colors: bool = Field(True, description="ANSI colours in console output")
    event_history_limit: int = Field(100, ge=0, description="Lifecycle events kept by the event bus")
    diagnostics_limit: int = Field(200, ge=0, description="Diagnostic records kept in memory")
    components: Optional[List[str]] = Field(
        None, description="Enabled component names; None enables every descriptor"
    )

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "fps": 60,
                "log_level": "INFO",
                "components": ["text-cursor", "magnetic-button"],
            }
        }

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        name = value.upper()
        if name not in LogLevel.__members__:
            raise ValueError(f"Unknown log level '{value}'")
        return name

    @property
    def level(self) -> LogLevel:
        return LogLevel[self.log_level]
