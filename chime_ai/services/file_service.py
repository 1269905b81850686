"""Statement file discovery and cleanup."""

from pathlib import Path

from chime_ai.core.utils import get_logger

logger = get_logger("chime-ai.files")


class FileService:
    """Service for the statement files of one import directory."""

    def __init__(self, directory: str | Path) -> None:
        """Initialize FileService for a directory of statement exports."""
        self.directory = Path(directory)

    def exists(self) -> bool:
        """Check that the import directory exists."""
        return self.directory.is_dir()

    def list_text_files(self) -> list[Path]:
        """List the ``*.txt`` statement files in the directory, sorted by name."""
        return sorted(self.directory.glob("*.txt"))

    def cleanup(self, files: list[Path]) -> list[Path]:
        """Delete the given files; return those that were removed."""
        removed = []
        for path in files:
            try:
                path.unlink()
            except OSError as exc:
                logger.error(f"Failed to delete {path}: {exc}")
            else:
                logger.info(f"Deleted {path}")
                removed.append(path)
        return removed
