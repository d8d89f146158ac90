"""Abstract pinning backend interface and shared directory helpers."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path


class PinnerError(Exception):
    """Raised when a pinning backend experiences a transport or service error.

    Args:
        backend: Name of the failing backend.
        message: Human-readable error description.
        status_code: Optional HTTP status code from the backend.
    """

    def __init__(self, backend: str, message: str, status_code: int | None = None) -> None:
        self.backend = backend
        self.message = message
        self.status_code = status_code
        super().__init__(f"{backend}: {message}")


class BasePinner(ABC):
    """Abstract pinning backend. All backends must implement this."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name as used in the aggregated backend list."""

    @abstractmethod
    async def pin_directory(self, directory: Path, site_label: str) -> str:
        """Upload and pin a directory tree.

        Args:
            directory: Root of the tree to upload.
            site_label: Human-readable label for the pin.

        Returns:
            Content identifier of the directory root.

        Raises:
            PinnerError: On transport or service errors, or a missing CID.
        """


def iter_directory_files(directory: Path) -> Iterator[tuple[str, Path]]:
    """Yield ``(relative_posix_path, path)`` for every file under a directory.

    Paths are yielded in sorted order so uploads are deterministic.
    """
    for path in sorted(directory.rglob("*")):
        if path.is_file():
            yield path.relative_to(directory).as_posix(), path


def iter_subdirectories(directory: Path) -> Iterator[str]:
    """Yield the relative posix path of every subdirectory, sorted."""
    for path in sorted(directory.rglob("*")):
        if path.is_dir():
            yield path.relative_to(directory).as_posix()


def read_directory_files(directory: Path) -> list[tuple[str, bytes]]:
    """Read every file under a directory into memory.

    Raises:
        FileNotFoundError: If ``directory`` does not exist.
    """
    if not directory.is_dir():
        msg = f"Not a directory: {directory}"
        raise FileNotFoundError(msg)
    return [(rel, path.read_bytes()) for rel, path in iter_directory_files(directory)]
