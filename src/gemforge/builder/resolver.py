"""Locates the gemspec to build when none is named on the command line."""

from pathlib import Path

from pyvider.telemetry import logger

from .exceptions import AmbiguousSpecificationError
from .models import GEMSPEC_EXTENSION


class GemspecResolver:
    """Picks the single `*.gemspec` file in a directory."""

    def __init__(self, directory: Path | str = ".") -> None:
        self.directory = Path(directory)

    def candidates(self) -> list[str]:
        return sorted(
            path.name
            for path in self.directory.glob(f"*{GEMSPEC_EXTENSION}")
            if path.is_file() and not path.name.startswith(".")
        )

    def resolve(self) -> str | None:
        """
        Returns the only gemspec in the directory, or None if there is none.

        Raises AmbiguousSpecificationError when more than one is present.
        """
        gemspecs = self.candidates()
        logger.debug("Gemspec candidates found", count=len(gemspecs))

        if len(gemspecs) > 1:
            raise AmbiguousSpecificationError(gemspecs)
        if not gemspecs:
            return None

        if self.directory == Path("."):
            return gemspecs[0]
        return str(self.directory / gemspecs[0])
