"""Core logic for turning a gemspec into a gem on disk."""

from collections.abc import Callable
import contextlib
import os
from pathlib import Path

from pyvider.telemetry import logger

from ..exceptions import SpecificationLoadError, SpecificationNotFoundError
from ..loader import load_specification
from ..models import GEMSPEC_EXTENSION, BuildOptions, PackageArtifact, Specification
from ..resolver import GemspecResolver
from .packager import build_package

SpecificationLoader = Callable[..., Specification | None]
Packager = Callable[..., PackageArtifact]


def canonical_gemspec_name(name_or_path: str | None) -> str:
    """Appends the `.gemspec` extension unless it is already present."""
    name = name_or_path or ""
    if os.path.splitext(name)[1] == GEMSPEC_EXTENSION:
        return name
    return f"{name}{GEMSPEC_EXTENSION}"


class BuildOrchestrator:
    """
    Resolves, loads and packages a single gemspec.

    The loader and packager are injectable; by default the TOML loader and
    the `.gem` packager from this package are used.
    """

    def __init__(
        self,
        options: BuildOptions,
        loader: SpecificationLoader = load_specification,
        packager: Packager = build_package,
        resolver: GemspecResolver | None = None,
    ) -> None:
        self.options = options
        self.loader = loader
        self.packager = packager
        self.resolver = resolver or GemspecResolver()

    def find_gemspec(self, name_or_path: str | None) -> str:
        """Returns the canonical gemspec path, which must exist."""
        candidate = name_or_path or self.resolver.resolve()
        gemspec = canonical_gemspec_name(candidate)
        if not Path(gemspec).exists():
            raise SpecificationNotFoundError(gemspec)
        return gemspec

    def load(self, gemspec: str) -> Specification:
        platform = self.options.platform
        if self.options.build_path:
            gemspec_dir = os.path.dirname(gemspec) or "."
            logger.debug("Relocating to load gemspec", directory=gemspec_dir)
            with contextlib.chdir(gemspec_dir):
                spec = self.loader(os.path.basename(gemspec), platform=platform)
        else:
            spec = self.loader(gemspec, platform=platform)

        if not spec:
            raise SpecificationLoadError(gemspec)
        return spec

    def build(self, name_or_path: str | None = None) -> PackageArtifact:
        gemspec = self.find_gemspec(name_or_path)
        logger.info("Building gem from gemspec", gemspec=gemspec)
        spec = self.load(gemspec)

        return self.packager(
            spec,
            force=self.options.force,
            strict=self.options.strict,
            output=self.options.output,
        )
