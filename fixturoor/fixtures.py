"""JSON fixture files."""

import json
import logging
from pathlib import Path
from typing import Any

from .errors import EncodingError, FixtureIOError

logger = logging.getLogger(__name__)


def to_document(artifact: Any) -> Any:
    """Return the JSON form of an artifact; dicts and lists pass through."""
    if hasattr(artifact, "to_json"):
        return artifact.to_json()
    return artifact


class FixtureWriter:
    """Writes artifacts as 2-space indented JSON into one directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, filename: str) -> Path:
        return self.directory / filename

    def write(self, artifact: Any, filename: str) -> Path:
        """Write ``artifact`` to ``filename``, replacing any existing file."""
        try:
            content = json.dumps(to_document(artifact), indent=2)
        except (TypeError, ValueError) as e:
            raise EncodingError(f"encode {filename}: {e}") from e

        path = self.path_for(filename)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                f.write(content)
        except OSError as e:
            raise FixtureIOError(f"write {path}: {e}") from e

        logger.debug(f"Wrote fixture: location={self.directory}, filename={filename}")
        return path

    def read(self, filename: str) -> Any:
        path = self.path_for(filename)
        try:
            with open(path) as f:
                return json.load(f)
        except OSError as e:
            raise FixtureIOError(f"read {path}: {e}") from e
        except ValueError as e:
            raise EncodingError(f"decode {path}: {e}") from e
