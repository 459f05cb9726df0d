"""Clases base para fuentes de muestras."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from salud_trends.model import Sample


@dataclass(frozen=True)
class SourcePaths:
    """Location of one sample export file."""

    path: Path


class SampleSource(ABC):
    """Abstract reader of already-canonical sample records."""

    def __init__(self, paths: SourcePaths) -> None:
        """Create a sample source.

        Args:
            paths: Source paths configuration.
        """
        self._paths = paths

    def validate(self) -> None:
        """Validate that the export file exists.

        Raises:
            FileNotFoundError: If the file is missing.
        """
        if not self._paths.path.is_file():
            raise FileNotFoundError(str(self._paths.path))

    @abstractmethod
    def load_samples(self) -> list[Sample]:
        """Read the file and return samples sorted by date and time."""
