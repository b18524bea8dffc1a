"""Benchmark fixture rendering through a mustache template."""

import logging
from importlib import resources
from pathlib import Path
from typing import Any, Optional

import chevron

from .errors import EncodingError, FixtureIOError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "benchmark-fixtures.mustache"


def default_template_path() -> Path:
    """Path of the template shipped with the package."""
    return Path(str(resources.files("fixturoor").joinpath("templates", DEFAULT_TEMPLATE)))


class BenchmarkRenderer:
    """Renders the four canonicalized artifacts into one source file.

    The template receives ``checkpoint_update``, ``sync_committee_update``,
    ``finalized_header_update`` and ``header_update``.
    """

    def __init__(
        self,
        output_dir: str | Path,
        filename: str,
        template_path: Optional[str | Path] = None,
    ):
        self.output_dir = Path(output_dir)
        self.filename = filename
        self.template_path = Path(template_path) if template_path else default_template_path()

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.filename

    def render(self, data: dict[str, Any]) -> str:
        try:
            with open(self.template_path) as f:
                template = f.read()
        except OSError as e:
            raise FixtureIOError(f"read template {self.template_path}: {e}") from e
        try:
            return chevron.render(template, data)
        except chevron.ChevronError as e:
            raise EncodingError(f"render template {self.template_path}: {e}") from e

    def write(self, data: dict[str, Any]) -> Path:
        """Render ``data`` and write it to the benchmark output path."""
        logger.info(f"Rendering file using mustache: template={self.template_path}")
        rendered = self.render(data)

        logger.info(f"Writing result file: location={self.output_dir}, filename={self.filename}")
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(self.output_path, "w") as f:
                f.write(rendered)
        except OSError as e:
            raise FixtureIOError(f"write {self.output_path}: {e}") from e
        return self.output_path
