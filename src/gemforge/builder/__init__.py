# gemforge/src/gemforge/builder/__init__.py
"""
This package contains the logic for building gems from gemspec files:
resolving which gemspec to use, loading it, and packaging it into a
distributable `.gem` archive.
"""

from .models import BuildOptions, PackageArtifact, Specification
from .packaging.orchestrator import BuildOrchestrator
from .resolver import GemspecResolver

__all__ = [
    "BuildOptions",
    "BuildOrchestrator",
    "GemspecResolver",
    "PackageArtifact",
    "Specification",
]
