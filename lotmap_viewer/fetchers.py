"""
Scheme fetchers.

The backend client is not part of this repository; anything with a
fetch(parking_id) -> dict method can feed ParkingSchemeService. The file
fetcher serves schemes saved as JSON, which is what the CLI and the demo use.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Protocol

from lotmap_scheme.errors import FetchFailed

logger = logging.getLogger(__name__)


class SchemeFetcher(Protocol):
    """Protocol for scheme sources (interface)."""

    def fetch(self, parking_id: str) -> Dict[str, Any]:
        """
        Return the decoded scheme payload for a parking.

        Raises:
            FetchFailed: With a displayable message
        """
        ...


class FileSchemeFetcher:
    """
    Reads <directory>/<parking_id>.json, or a single JSON file.

    Usage:
        fetcher = FileSchemeFetcher(Path("./data/schemes"))
        payload = fetcher.fetch("sample_floor")

        fetcher = FileSchemeFetcher(Path("./scheme.json"))
        payload = fetcher.fetch("ignored")
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def resolve(self, parking_id: str) -> Path:
        if self.path.is_file():
            return self.path
        return self.path / f"{parking_id}.json"

    def fetch(self, parking_id: str) -> Dict[str, Any]:
        path = self.resolve(parking_id)
        logger.debug(f"Reading scheme for {parking_id!r} from {path}")

        if not path.exists():
            raise FetchFailed(f"Scheme not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FetchFailed(f"Invalid JSON in {path}: {e}") from e
        except OSError as e:
            raise FetchFailed(f"Could not read {path}: {e}") from e
