"""PdfConverter turns statement PDFs into text using the external pdftotext binary."""

import shutil
import subprocess
from pathlib import Path

from chime_ai.core.utils import get_logger

logger = get_logger("chime-ai.pdf")


class PdfConverter:
    """Convert ``*.pdf`` statements to sibling ``*.txt`` files with ``pdftotext -layout``."""

    def __init__(self, command: str = "pdftotext") -> None:
        """Initialize the converter with the name or path of the pdftotext executable."""
        self.command = command

    def is_available(self) -> bool:
        """Check whether the converter binary is on PATH."""
        return shutil.which(self.command) is not None

    def convert(self, pdf_path: Path) -> Path:
        """Convert one PDF and return the path of the text file written next to it."""
        txt_path = pdf_path.with_suffix(".txt")
        subprocess.run(
            [self.command, "-layout", str(pdf_path), str(txt_path)],
            check=True,
            capture_output=True,
        )
        return txt_path

    def convert_directory(self, directory: Path) -> list[Path]:
        """Convert every PDF in the directory; return the text files that were produced.

        Nothing is converted when the binary is missing. A PDF that fails to convert is
        logged and left out of the result.
        """
        if not self.is_available():
            logger.warning(f"{self.command} not found, skipping PDF conversion. Install poppler-utils to process PDFs.")
            return []
        logger.info(f"{self.command} found, converting PDFs to text...")
        converted = []
        for pdf_path in sorted(directory.glob("*.pdf")):
            try:
                txt_path = self.convert(pdf_path)
            except (OSError, subprocess.CalledProcessError) as exc:
                logger.error(f"Failed to convert {pdf_path} to text: {exc}")
                continue
            logger.info(f"Converted {pdf_path} to {txt_path}")
            converted.append(txt_path)
        return converted
