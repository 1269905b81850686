"""Command line entrypoint: ``chime-ai ingest``, ``chime-ai ask`` and ``chime-ai serve``."""

import argparse
import sys

from chime_ai.agents.query_agent import build_agent
from chime_ai.core.db import open_database
from chime_ai.core.exceptions import ChimeAIError, ConfigurationError
from chime_ai.core.repository import TransactionRepository
from chime_ai.core.settings import Settings, get_settings
from chime_ai.core.utils import get_logger, setup_logging
from chime_ai.workers.ingest_runner import run_ingest

logger = get_logger("chime-ai.cli")


def ingest_command(settings: Settings, directory: str) -> int:
    """Ingest a directory of statements and print a summary."""
    with open_database(settings.database_url) as engine:
        report = run_ingest(directory, TransactionRepository(engine), settings)
    for result in report.files:
        line = f"{result.path}: {result.inserted} inserted, {result.duplicates} duplicates"
        if result.error:
            line += f" (error: {result.error})"
        print(line)
    print(f"All files processed: {report.inserted} transactions inserted, {report.duplicates} duplicates skipped.")
    return 1 if report.failed else 0


def ask_command(settings: Settings, question: str | None) -> int:
    """Answer a question about the transaction history and print it."""
    if not settings.groq_api_key:
        msg = "GROQ_API_KEY environment variable not set"
        raise ConfigurationError(msg)
    with open_database(settings.database_url) as engine:
        agent = build_agent(TransactionRepository(engine), settings)
        answer = agent.ask(question or settings.default_question)
    print("Your financial analysis:")
    print(answer.answer)
    return 0


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """Build the argument parser for the chime-ai command."""
    parser = argparse.ArgumentParser(prog="chime-ai", description="Bank statement ingestion and Q&A")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Ingest PDF and text statements from a directory")
    ingest.add_argument(
        "--dir",
        dest="directory",
        default=settings.statements_dir,
        help=f"Directory containing PDFs and text files (default: {settings.statements_dir})",
    )

    ask = subparsers.add_parser("ask", help="Ask a question about your transactions")
    ask.add_argument("question", nargs="?", default=None, help="Question to answer (default: built-in question)")

    subparsers.add_parser("serve", help="Run the HTTP API")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the chime-ai command."""
    settings = get_settings()
    setup_logging(settings.log_dir, settings.log_file)
    args = build_parser(settings).parse_args(argv)

    if args.command == "serve":
        from chime_ai.main import run

        run()
        return 0

    try:
        if args.command == "ingest":
            return ingest_command(settings, args.directory)
        return ask_command(settings, args.question)
    except ConfigurationError as exc:
        logger.critical(str(exc))
        return 1
    except ChimeAIError as exc:
        logger.error(f"{args.command} failed: {exc}")
        return 1
    except Exception as exc:
        logger.critical(f"Fatal error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
