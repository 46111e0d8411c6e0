"""
Configuration schema for the scheme viewer.

This module defines the configuration structure for the parking scheme
screen: layout padding, place footprint, viewport and zoom limits, and the
scheme source.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple
import yaml

from lotmap_scheme.geometry.normalizer import BoundsMode
from lotmap_scheme.geometry.shapes import Size
from lotmap_scheme.viewmodel import SchemeSettings


@dataclass(frozen=True)
class SchemeLayoutConfig:
    """
    Normalization settings.

    Defaults reproduce the production map: 60 units of padding and
    34x60 parking places.
    """

    width_offset: float = 60.0
    height_offset: float = 60.0
    place_size: Tuple[float, float] = (34.0, 60.0)  # (width, height)
    bounds_mode: str = "legacy"  # "legacy" or "footprint"

    def __post_init__(self):
        """Validate layout configuration."""
        if self.width_offset < 0 or self.height_offset < 0:
            raise ValueError(
                f"offsets must be >= 0, got ({self.width_offset}, {self.height_offset})"
            )

        width, height = self.place_size
        if width <= 0 or height <= 0:
            raise ValueError(
                f"place_size must have positive dimensions, got {self.place_size}"
            )

        valid_modes = {mode.value for mode in BoundsMode}
        if self.bounds_mode not in valid_modes:
            raise ValueError(
                f"Invalid bounds_mode: {self.bounds_mode}. "
                f"Must be one of {valid_modes}"
            )

    @property
    def place_footprint(self) -> Size:
        return Size(float(self.place_size[0]), float(self.place_size[1]))


@dataclass(frozen=True)
class ViewportConfig:
    """Visible surface and zoom limits."""

    size: Tuple[float, float] = (390.0, 844.0)  # (width, height)
    max_zoom: float = 1.0
    top_offset: float = 50.0

    def __post_init__(self):
        """Validate viewport configuration."""
        width, height = self.size
        if width <= 0 or height <= 0:
            raise ValueError(
                f"viewport size must have positive dimensions, got {self.size}"
            )
        if self.max_zoom <= 0:
            raise ValueError(f"max_zoom must be > 0, got {self.max_zoom}")
        if self.top_offset < 0:
            raise ValueError(f"top_offset must be >= 0, got {self.top_offset}")

    @property
    def viewport_size(self) -> Size:
        return Size(float(self.size[0]), float(self.size[1]))


@dataclass(frozen=True)
class SourceConfig:
    """Where schemes are read from (the file fetcher)."""

    directory: Path = Path("./data/schemes")


@dataclass(frozen=True)
class ViewerConfig:
    """
    Main configuration for the scheme viewer.

    Loaded from YAML and validated at startup.
    Immutable after construction (frozen dataclass).
    """

    parking_id: Optional[str] = None
    scheme: SchemeLayoutConfig = field(default_factory=SchemeLayoutConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    source: SourceConfig = field(default_factory=SourceConfig)

    def __post_init__(self):
        """Validate viewer configuration."""
        if self.parking_id is not None and not self.parking_id:
            raise ValueError("parking_id cannot be empty")

    @classmethod
    def default(cls) -> "ViewerConfig":
        return cls()

    def scheme_settings(self) -> SchemeSettings:
        """Layout constants handed to SchemeViewModel."""
        return SchemeSettings(
            width_offset=float(self.scheme.width_offset),
            height_offset=float(self.scheme.height_offset),
            bounds_mode=BoundsMode(self.scheme.bounds_mode),
            max_zoom=float(self.viewport.max_zoom),
            top_offset=float(self.viewport.top_offset),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "ViewerConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            parking_id: "lot-7"

            scheme:
              width_offset: 60
              height_offset: 60
              place_size: [34, 60]  # [width, height]
              bounds_mode: "legacy"

            viewport:
              size: [390, 844]  # [width, height]
              max_zoom: 1.0
              top_offset: 50

            source:
              directory: "./data/schemes"
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping: {yaml_path}")

        scheme_data = dict(data.get("scheme") or {})
        if "place_size" in scheme_data:
            scheme_data["place_size"] = tuple(scheme_data["place_size"])
        scheme = SchemeLayoutConfig(**scheme_data)

        viewport_data = dict(data.get("viewport") or {})
        if "size" in viewport_data:
            viewport_data["size"] = tuple(viewport_data["size"])
        viewport = ViewportConfig(**viewport_data)

        source_data = data.get("source") or {}
        source = SourceConfig(
            directory=Path(source_data.get("directory", "./data/schemes"))
        )

        parking_id = data.get("parking_id")

        return cls(
            parking_id=None if parking_id is None else str(parking_id),
            scheme=scheme,
            viewport=viewport,
            source=source,
        )
