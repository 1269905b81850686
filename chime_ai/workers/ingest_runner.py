"""Statement ingestion: parse, deduplicate and store transactions from a directory of exports."""

import concurrent.futures
from pathlib import Path

from chime_ai.core.db import is_memory_url
from chime_ai.core.exceptions import IngestionError
from chime_ai.core.models import FileIngestResult, IngestReport, Transaction
from chime_ai.core.repository import TransactionRepository
from chime_ai.core.settings import Settings
from chime_ai.core.utils import get_logger, utcnow_iso
from chime_ai.services.file_service import FileService
from chime_ai.services.pdf_service import PdfConverter
from chime_ai.services.statement_parser import iter_transactions

logger = get_logger("chime-ai.ingest")


class IngestRunner:
    """Ingest statement files with one worker per file.

    Duplicate detection looks at what is already committed, so two files processed at the
    same time that both introduce the same new transaction can both insert it. SQLite
    serializes the writes; nothing here locks across files.
    """

    def __init__(
        self,
        repository: TransactionRepository,
        max_workers: int = 6,
        converter: PdfConverter | None = None,
    ) -> None:
        """Initialize IngestRunner with the repository the transactions are written to."""
        self.repository = repository
        self.max_workers = max_workers
        self.converter = converter or PdfConverter()

    def run(self, directory: str | Path) -> IngestReport:
        """Convert PDFs, ingest every text statement in the directory, then remove converted text."""
        file_service = FileService(directory)
        if not file_service.exists():
            msg = f"Statements directory not found: {directory}"
            logger.error(msg)
            raise IngestionError(msg)
        report = IngestReport(directory=str(directory), started_at=utcnow_iso())
        converted = self.converter.convert_directory(file_service.directory)
        report.converted = [str(p) for p in converted]
        try:
            files = file_service.list_text_files()
            if not files:
                logger.info("No text files found for processing.")
                return report
            logger.info(f"Found {len(files)} text files for processing.")
            report.files = self.process_files(files)
        finally:
            file_service.cleanup(converted)
            report.completed_at = utcnow_iso()
        logger.info(
            f"Ingestion finished: {report.inserted} inserted, {report.duplicates} duplicates, "
            f"{len(report.failed)} failed files"
        )
        return report

    def worker_count(self) -> int:
        """Return the number of ingestion threads; one for an in-memory database."""
        if is_memory_url(str(self.repository.engine.url)):
            return 1
        return self.max_workers

    def process_files(self, files: list[Path]) -> list[FileIngestResult]:
        """Process files in parallel and wait for all of them; results keep the input order."""
        results: list[FileIngestResult | None] = [None] * len(files)
        workers = self.worker_count()
        if workers < self.max_workers:
            logger.info("In-memory database, ingesting files one at a time")
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self.process_file, path): idx for idx, path in enumerate(files)}
            for future in concurrent.futures.as_completed(futures):
                results[futures[future]] = future.result()
        return results

    def process_file(self, path: Path) -> FileIngestResult:
        """Parse a single statement file and insert its new transactions in one batch.

        Any failure is recorded on the returned result instead of being raised, so one bad
        file never stops the others.
        """
        result = FileIngestResult(path=str(path))
        logger.info(f"Processing file: {path}")
        try:
            candidates = self._read_candidates(path, result)
            retained = self._drop_duplicates(candidates, result)
            if retained:
                self.repository.insert_transactions(retained)
                result.inserted = len(retained)
                logger.info(f"Inserted {len(retained)} transactions from {path}")
            else:
                logger.info(f"No new transactions found in {path}")
        except Exception as exc:
            logger.exception(f"Error ingesting file {path}")
            result.status = "error"
            result.error = str(exc)
        return result

    def _read_candidates(self, path: Path, result: FileIngestResult) -> list[Transaction]:
        candidates = []
        with path.open(encoding="utf-8", errors="replace") as handle:
            for number, txn, error in iter_transactions(handle):
                if error is not None:
                    logger.warning(f"Skipping line {number} in {path}: {error}")
                    result.skipped_lines += 1
                    continue
                candidates.append(txn)
        result.parsed = len(candidates)
        return candidates

    def _drop_duplicates(self, candidates: list[Transaction], result: FileIngestResult) -> list[Transaction]:
        retained = []
        seen = set()
        for txn in candidates:
            key = txn.dedup_key
            if key in seen or self.repository.transaction_exists(txn):
                logger.info(f"Duplicate transaction found, skipping: {txn.model_dump()}")
                result.duplicates += 1
                continue
            seen.add(key)
            retained.append(txn)
        return retained


def run_ingest(directory: str | Path, repository: TransactionRepository, settings: Settings) -> IngestReport:
    """Top-level function to ingest a directory with the configured worker count and converter."""
    runner = IngestRunner(
        repository,
        max_workers=settings.ingest_max_workers,
        converter=PdfConverter(settings.pdftotext_command),
    )
    return runner.run(directory)
