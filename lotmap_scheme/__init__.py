"""
lotmap Scheme Engine v1.0
=========================

Bounded Context: Parking floor geometry and viewport fitting.

Design Philosophy:
- Separation of Concerns: Geometry, Viewport, Orchestration separated
- Pure core: normalization and fitting have no side effects
- Single owner: the view model holds the only mutable state
- Stale asynchronous results are dropped, never applied

Architecture:

    lotmap_scheme/
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── shapes.py      # Point, Size, Place, Line, SchemeRect, SchemeModel
    │   └── normalizer.py  # GeometryNormalizer (bounds + re-origin)
    │
    ├── viewport/          # Zoom fitting (stateless)
    │   └── fitter.py      # ViewportFitter, ViewportFit, ZoomBounds
    │
    ├── events.py          # EventType, SchemeEvent
    ├── dispatch.py        # Dispatcher protocol, MainThreadDispatcher, ImmediateDispatcher
    ├── errors.py          # SchemeError, FetchFailed, PayloadError
    └── viewmodel.py       # SchemeViewModel (generation-guarded orchestration)

Usage:

    # 1. Normalize (pure)
    from lotmap_scheme import GeometryNormalizer, SchemeModel, Place, Point

    model = SchemeModel(places=[Place(origin=Point(100, 200))])
    result = GeometryNormalizer.normalize(model)
    result.rect.size            # Size(width=94.0, height=120.0)
    result.model.places[0]      # origin (30, 30)

    # 2. Fit (pure)
    from lotmap_scheme import ViewportFitter, Size

    scale = ViewportFitter.fit_scale(Size(2000, 500), Size(400, 800))  # 0.2

    # 3. Orchestrate (threads + main context)
    from lotmap_scheme import SchemeViewModel, MainThreadDispatcher

    dispatcher = MainThreadDispatcher()
    viewmodel = SchemeViewModel(viewport_size=Size(390, 844), dispatcher=dispatcher)
    viewmodel.add_observer(print)
    viewmodel.update_scheme(model)
    dispatcher.run_pending(timeout=1.0)
"""

# Geometry Layer (immutable, stateless)
from lotmap_scheme.geometry.shapes import (
    PLACE_SIZE,
    Point,
    Size,
    Place,
    Line,
    SchemeRect,
    SchemeModel,
)
from lotmap_scheme.geometry.normalizer import (
    BoundsMode,
    GeometryNormalizer,
    NormalizationResult,
)

# Viewport Layer (stateless)
from lotmap_scheme.viewport.fitter import ViewportFitter, ViewportFit, ZoomBounds

# Orchestration
from lotmap_scheme.errors import SchemeError, FetchFailed, PayloadError
from lotmap_scheme.events import EventType, SchemeEvent
from lotmap_scheme.dispatch import Dispatcher, MainThreadDispatcher, ImmediateDispatcher
from lotmap_scheme.viewmodel import (
    SchemeViewModel,
    SchemeSettings,
    SchemePhase,
    SchemeState,
    EmptyScheme,
    ReadyScheme,
)

__all__ = [
    # Geometry
    "PLACE_SIZE",
    "Point",
    "Size",
    "Place",
    "Line",
    "SchemeRect",
    "SchemeModel",
    "BoundsMode",
    "GeometryNormalizer",
    "NormalizationResult",
    # Viewport
    "ViewportFitter",
    "ViewportFit",
    "ZoomBounds",
    # Orchestration
    "SchemeError",
    "FetchFailed",
    "PayloadError",
    "EventType",
    "SchemeEvent",
    "Dispatcher",
    "MainThreadDispatcher",
    "ImmediateDispatcher",
    "SchemeViewModel",
    "SchemeSettings",
    "SchemePhase",
    "SchemeState",
    "EmptyScheme",
    "ReadyScheme",
]

__version__ = "1.0.0"
