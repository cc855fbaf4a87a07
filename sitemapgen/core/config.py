from datetime import timezone, tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

from ..xml_output.types import OutputFormat, XMLConfig


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # json or console

    # XML output
    output_format: OutputFormat = OutputFormat.COMPACT
    validate_output: bool = True
    schema_location: Optional[Path] = None

    # Dates without an offset are read in this timezone
    timezone: str = "UTC"

    model_config = SettingsConfigDict(
        env_prefix="SITEMAP_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def tzinfo(self) -> tzinfo:
        """Get the timezone used for naive dates."""
        if self.timezone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.timezone)

    def xml_config(self) -> XMLConfig:
        """Build the XML output configuration."""
        return XMLConfig(
            output_format=self.output_format,
            validate_output=self.validate_output,
            schema_location=self.schema_location,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
