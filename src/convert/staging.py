"""Per-image staging directories for intermediate artifacts.

Each pipeline run owns one arena. The directory is created on entry and
removed on every exit path, including exceptions.
"""

from __future__ import annotations

from pathlib import Path
import shutil
import tempfile
from types import TracebackType

from core.constants import STAGING_DIR_PREFIX
from core.errors import TiffpressStagingError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class StagingArena:
    """Scoped, collision-free working directory for one image."""

    def __init__(self, staging_root: Path, label: str) -> None:
        self._staging_root = staging_root
        self._label = label
        self._directory: Path | None = None
        self._used = False

    @property
    def directory(self) -> Path:
        """Return the live staging directory."""
        if self._directory is None:
            raise TiffpressStagingError("Staging arena is not active.")
        return self._directory

    def path(self, file_name: str) -> Path:
        """Return a path for an artifact inside the arena.

        Raises:
            TiffpressStagingError: If the arena is inactive or the name escapes it.
        """
        if Path(file_name).name != file_name:
            raise TiffpressStagingError(f"Staging file name must be a bare name: {file_name!r}")
        return self.directory / file_name

    def __enter__(self) -> "StagingArena":
        if self._used:
            raise TiffpressStagingError("Staging arena cannot be reused.")
        self._used = True
        try:
            self._staging_root.mkdir(parents=True, exist_ok=True)
            created = tempfile.mkdtemp(
                prefix=f"{STAGING_DIR_PREFIX}{self._label}-", dir=self._staging_root
            )
        except OSError as error:
            raise TiffpressStagingError(
                f"Failed to create staging directory under {self._staging_root}: {error}"
            ) from error
        self._directory = Path(created)
        _LOGGER.debug("staging_created", directory=str(self._directory))
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        directory = self._directory
        self._directory = None
        if directory is None:
            return
        shutil.rmtree(directory, ignore_errors=True)
        if directory.exists():
            _LOGGER.warning("staging_cleanup_incomplete", directory=str(directory))
        else:
            _LOGGER.debug("staging_removed", directory=str(directory))
