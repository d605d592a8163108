"""CLI entrypoint for the document digitizer."""

import argparse
import asyncio
import logging
import os
import sys
import warnings
from datetime import datetime
from pathlib import Path

from digitizer.core.config import (
    ExportConfig,
    api_key_env_var,
    extraction_model,
    llm_provider,
    storage_home,
)

# Suppress LiteLLM's direct prints (must be before import)
os.environ["LITELLM_LOG"] = "ERROR"

warnings.filterwarnings("ignore", message="Pydantic serializer warnings")
warnings.filterwarnings("ignore", category=ResourceWarning)

# Suppress noisy loggers (HTTP clients, LiteLLM internals)
for logger_name in ["httpx", "httpcore", "litellm", "LiteLLM", "LiteLLM Router", "asyncio"]:
    logging.getLogger(logger_name).setLevel(logging.ERROR)

from dotenv import find_dotenv, load_dotenv  # noqa: E402 - must be after logging config

from digitizer.core import (  # noqa: E402
    CostTracker,
    DigitizerError,
    DocumentTypeRegistry,
    ExtractionClient,
    HistoryStore,
    LocalStorage,
    export_csv,
    export_filename,
    get_logger,
    read_raw_files,
    validate_paths,
)
from digitizer.pydantic_models import (  # noqa: E402
    ColumnDefinition,
    DocumentType,
    ExtractedItem,
    ProcessingStatus,
)
from digitizer.session import DigitizationSession  # noqa: E402


def _build_services(home: str | None) -> tuple[DocumentTypeRegistry, HistoryStore]:
    storage = LocalStorage(home or storage_home())
    registry = DocumentTypeRegistry(storage=storage)
    history = HistoryStore(storage).load()
    return registry, history


def _print_table(items: list[ExtractedItem], columns: tuple[ColumnDefinition, ...], limit: int = 20) -> None:
    """Plain-text preview of the first rows."""
    widths = [
        min(40, max([len(c.label)] + [len(i.get(c.key)) for i in items[:limit]]))
        for c in columns
    ]
    print("  ".join(c.label.ljust(w) for c, w in zip(columns, widths)))
    print("  ".join("-" * w for w in widths))
    for item in items[:limit]:
        print("  ".join(item.get(c.key)[:w].ljust(w) for c, w in zip(columns, widths)))
    if len(items) > limit:
        print(f"... {len(items) - limit} more row(s)")


def _write_csv(output_dir: str, file_name: str, content: bytes) -> Path:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / file_name
    path.write_bytes(content)
    return path


# Commands

async def extract(
    files: list[str],
    doc_type: DocumentType,
    output_dir: str = ExportConfig.OUTPUT_DIR,
    home: str | None = None,
    verbose: bool = False,
    log_dir: str | None = None,
) -> bool:
    """Run one extraction session and write the CSV.

    Returns:
        True if the session completed.
    """
    key_var = api_key_env_var()
    if not os.environ.get(key_var):
        print(f"Error: {key_var} not set")
        if llm_provider() == "azure":
            print("For Azure, set: AZURE_API_KEY, AZURE_API_BASE, AZURE_API_VERSION")
        else:
            print(f"Set it in .env or export {key_var}=...")
        return False

    try:
        validate_paths(files)
        raw_files = read_raw_files(files)
    except (DigitizerError, FileNotFoundError) as e:
        print(f"Error: {e}")
        return False

    logger = get_logger(verbose=verbose, log_dir=log_dir)
    registry, history = _build_services(home)
    cost_tracker = CostTracker()
    session = DigitizationSession(
        registry, history, ExtractionClient(cost_tracker=cost_tracker), logger=logger,
    )

    print(f"\n{'='*50}")
    print(f"Digitizing: {', '.join(f.name for f in raw_files)}")
    print(f"{'='*50}")
    print(f"  Type: {registry.label_for(doc_type)}")
    print(f"  Provider: {llm_provider()}")
    print(f"  Model: {extraction_model()}")
    print()

    try:
        state = await session.select_files(raw_files, doc_type)
    except DigitizerError as e:
        print(f"Error: {e}")
        return False

    if state.status is ProcessingStatus.ERROR:
        print(f"\n[ERROR] Extraction failed: {state.message}")
        return False

    print()
    _print_table(session.active_items, session.active_columns)
    print(f"\n[HISTORY] {session.active_history_id}")

    if session.active_items:
        export = session.export_csv()
        path = _write_csv(output_dir, export.file_name, export.content)
        print(f"[OUTPUT] {path}")
    else:
        print("No rows were extracted; nothing to export.")

    if cost_tracker.call_count > 0:
        print(f"\n{cost_tracker.summary()}")
    if logger.log_file:
        print(f"[LOG] {logger.log_file}")
    return True


def history_command(args: argparse.Namespace) -> bool:
    registry, history = _build_services(args.home)

    if args.action == "list":
        if not len(history):
            print("No history.")
        for entry in history.entries:
            when = datetime.fromtimestamp(entry.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
            print(f"{entry.id}  {when}  {entry.doc_type.value:<8} {len(entry.items):>4} rows  {entry.file_name}")
        return True

    try:
        entry = history.select_session(args.id)
    except KeyError:
        print(f"Error: no history entry {args.id}")
        return False

    if args.action == "show":
        print(f"{entry.file_name} ({entry.doc_type.value}, {len(entry.items)} rows)\n")
        _print_table(entry.items, registry.columns_for(entry.doc_type), limit=len(entry.items))
    elif args.action == "delete":
        history.delete_session(entry.id)
        print(f"Deleted {entry.id}")
    elif args.action == "export":
        if not entry.items:
            print("Error: entry has no rows to export")
            return False
        columns = registry.columns_for(entry.doc_type)
        path = _write_csv(args.output, export_filename(entry.doc_type), export_csv(entry.items, columns))
        print(f"[OUTPUT] {path}")
    return True


def prompts_command(args: argparse.Namespace) -> bool:
    registry, _ = _build_services(args.home)

    if args.action == "show":
        types = [args.type] if args.type else list(DocumentType)
        for doc_type in types:
            config = registry.config_for(doc_type)
            marker = " (custom)" if registry.is_overridden(doc_type) else ""
            print(f"[{doc_type.value}] {config.label}{marker}")
            print(config.prompt)
            print("Columns: " + ", ".join(f"{c.label} ({c.key})" for c in config.columns))
            print()
    elif args.action == "set":
        text = Path(args.file).read_text(encoding="utf-8") if args.file else args.text
        try:
            registry.override_instruction(args.type, text or "")
        except DigitizerError as e:
            print(f"Error: {e}")
            return False
        print(f"Instruction for {args.type.value} updated.")
    elif args.action == "reset":
        if args.type:
            registry.reset_instruction(args.type)
        else:
            registry.reset_all()
        print("Instructions reset to defaults.")
    return True


def _doc_type(value: str) -> DocumentType:
    try:
        return DocumentType(value.upper())
    except ValueError:
        choices = ", ".join(t.value for t in DocumentType)
        raise argparse.ArgumentTypeError(f"invalid document type '{value}' (choose from {choices})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="digitize",
        description="Digitize scanned documents into editable tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  digitize extract scans/bom_page1.jpg scans/bom_page2.jpg
  digitize extract -t INVOICE invoice.pdf -o exports
  digitize history list
  digitize prompts set BOM --file bom_prompt.txt
        """,
    )
    parser.add_argument(
        "--home",
        default=None,
        help="Storage directory for history and prompts (default: $DIGITIZER_HOME or ~/.digitizer)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_extract = sub.add_parser("extract", help="Transcribe up to 3 pages of one document")
    p_extract.add_argument("files", nargs="+", help="Image or PDF files, in page order")
    p_extract.add_argument(
        "-t", "--type",
        type=_doc_type,
        default=DocumentType.BOM,
        help="Document type: BOM, INVOICE, PO or OTHER (default: BOM)",
    )
    p_extract.add_argument(
        "-o", "--output",
        default=ExportConfig.OUTPUT_DIR,
        help=f"Directory for the CSV export (default: {ExportConfig.OUTPUT_DIR})",
    )
    p_extract.add_argument("-v", "--verbose", action="store_true", help="Verbose output with DEBUG logging")
    p_extract.add_argument("--log-dir", default=None, help="Also write a log file to this directory")

    p_history = sub.add_parser("history", help="Browse past extraction sessions")
    h_sub = p_history.add_subparsers(dest="action", required=True)
    h_sub.add_parser("list", help="List sessions, most recent first")
    for action, help_text in (("show", "Print a session's rows"), ("delete", "Delete a session")):
        p = h_sub.add_parser(action, help=help_text)
        p.add_argument("id")
    p_hexport = h_sub.add_parser("export", help="Write a session's rows as CSV")
    p_hexport.add_argument("id")
    p_hexport.add_argument("-o", "--output", default=ExportConfig.OUTPUT_DIR)

    p_prompts = sub.add_parser("prompts", help="View or edit extraction instructions")
    pr_sub = p_prompts.add_subparsers(dest="action", required=True)
    p_show = pr_sub.add_parser("show", help="Print instructions and columns")
    p_show.add_argument("type", nargs="?", type=_doc_type)
    p_set = pr_sub.add_parser("set", help="Replace the instruction of one type")
    p_set.add_argument("type", type=_doc_type)
    source = p_set.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="New instruction text")
    source.add_argument("--file", help="Read the new instruction from a file")
    p_reset = pr_sub.add_parser("reset", help="Restore default instructions")
    p_reset.add_argument("type", nargs="?", type=_doc_type)

    return parser


def main(argv: list[str] | None = None):
    load_dotenv(find_dotenv(usecwd=True))
    args = build_parser().parse_args(argv)

    if args.command == "extract":
        ok = asyncio.run(extract(
            files=args.files,
            doc_type=args.type,
            output_dir=args.output,
            home=args.home,
            verbose=args.verbose,
            log_dir=args.log_dir,
        ))
    elif args.command == "history":
        ok = history_command(args)
    else:
        ok = prompts_command(args)

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
