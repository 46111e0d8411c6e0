"""
lotmap Viewer
=============

Bounded Context: The parking map screen around the scheme engine.

Architecture:
- config.py: ViewerConfig (YAML, validated)
- fetchers.py: SchemeFetcher protocol, FileSchemeFetcher
- service.py: ParkingSchemeService (fetch → decode → view model)
- surface.py: SchemeSurface (event consumer, zoom state)
- rendering/: SchemeVisualizer (supervision preview drawing)

Threading Model:
- Fetch/decode and normalization run on worker threads
- Events and state changes run on the view model dispatcher
"""

from lotmap_viewer.config import ViewerConfig, SchemeLayoutConfig, ViewportConfig, SourceConfig
from lotmap_viewer.fetchers import SchemeFetcher, FileSchemeFetcher
from lotmap_viewer.service import ParkingSchemeService
from lotmap_viewer.surface import SchemeSurface
from lotmap_viewer.rendering import SchemeVisualizer

__all__ = [
    "ViewerConfig",
    "SchemeLayoutConfig",
    "ViewportConfig",
    "SourceConfig",
    "SchemeFetcher",
    "FileSchemeFetcher",
    "ParkingSchemeService",
    "SchemeSurface",
    "SchemeVisualizer",
]
