"""Configuration management."""

from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

from .core.raster_mapper import HeightmapRotation


class Settings(BaseSettings):
    """Raster import settings pulled from environment variables."""

    # File lookup
    search_paths: List[Path] = Field(
        default_factory=lambda: [Path(".")],
        description="Directories searched for raster files",
    )
    default_subdir: str = Field(
        default="heightmap", description="Subdirectory of each search path holding rasters"
    )

    # Import
    heightmap_rotation: HeightmapRotation = Field(
        default=HeightmapRotation.COUNTER_CLOCKWISE,
        description="Orientation of the image relative to the map grid",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Logging format (console or json)")

    class Config:
        env_prefix = "RASTERMAP_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
