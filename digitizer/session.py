"""Digitization session: the workflow from file selection to an editable table.

States and transitions:

    idle ──select_files──► uploading ──ingested──► processing ──┬─► complete
      ▲                                                         └─► error
      └──────────────── new_upload (from complete or error) ◄───────┘

select_history() jumps to complete from any state that is not busy.

The session owns the active record set. Edits always target that set and are
then mirrored into the active history entry, if there is one.
"""

from typing import Sequence

from digitizer.core.errors import (
    ConfigurationError,
    ExtractionError,
    SessionStateError,
    validation_error,
)
from digitizer.core.export import CSV_MEDIA_TYPE, export_csv, export_filename
from digitizer.core.extraction_client import ExtractionClient
from digitizer.core.history_store import HistoryStore
from digitizer.core.ingestion import ingest, validate_selection
from digitizer.core.registry import DocumentTypeRegistry
from digitizer.core.session_logger import SessionLogger, get_logger
from digitizer.pydantic_models import (
    ColumnDefinition,
    CsvExport,
    DocumentType,
    ExtractedItem,
    FilePayload,
    HistoryItem,
    ProcessingState,
    ProcessingStatus,
    RawFile,
)


def history_label(file_names: Sequence[str]) -> str:
    """'scan.jpg' for one file, 'scan.jpg +2' for three."""
    if len(file_names) == 1:
        return file_names[0]
    return f"{file_names[0]} +{len(file_names) - 1}"


class DigitizationSession:
    """Single-user workflow state machine.

    Usage:
        session = DigitizationSession(registry, history, ExtractionClient())
        await session.select_files(raw_files, DocumentType.BOM)
        if session.state.status is ProcessingStatus.COMPLETE:
            session.update_item(session.active_items[0].id, "quantity", "6")
            csv = session.export_csv()
    """

    def __init__(
        self,
        registry: DocumentTypeRegistry,
        history: HistoryStore,
        extraction_client: ExtractionClient,
        logger: SessionLogger | None = None,
    ) -> None:
        self.registry = registry
        self.history = history
        self.extraction_client = extraction_client
        self.logger = logger or get_logger()

        self.state: ProcessingState = ProcessingState.idle()
        self.active_doc_type: DocumentType = DocumentType.BOM
        self.active_items: list[ExtractedItem] = []
        self.active_payloads: list[FilePayload] = []
        self.active_history_id: str | None = None

    # Derived views

    @property
    def previews(self) -> list[str]:
        return [p.preview for p in self.active_payloads]

    @property
    def active_columns(self) -> tuple[ColumnDefinition, ...]:
        return self.registry.columns_for(self.active_doc_type)

    def _set_state(self, new: ProcessingState) -> None:
        self.logger.transition(str(self.state.status), str(new.status), new.message)
        self.state = new

    def _require_not_busy(self, action: str) -> None:
        if self.state.is_busy:
            raise SessionStateError(
                f"Cannot {action} while an extraction is in progress.",
                context={"state": str(self.state.status)},
            )

    # Workflow

    async def select_files(self, raw_files: Sequence[RawFile], doc_type: DocumentType) -> ProcessingState:
        """Run one extraction from a file selection.

        Only allowed from idle. An invalid selection raises ValidationError and
        leaves the session untouched. Extraction and configuration failures end
        in the error state instead of raising.

        Returns:
            The final state (complete or error).

        Raises:
            SessionStateError: If the session is not idle.
            ValidationError: If the selection is rejected.
        """
        if self.state.status is not ProcessingStatus.IDLE:
            raise SessionStateError(
                "Start a new upload before selecting files.",
                context={"state": str(self.state.status)},
            )
        doc_type = DocumentType(doc_type)
        validate_selection(raw_files)

        self.logger.start_run(history_label([f.name for f in raw_files]))
        self.active_history_id = None
        self.active_doc_type = doc_type
        self._set_state(ProcessingState.uploading())
        try:
            self.active_payloads = ingest(raw_files)
            self._set_state(ProcessingState.processing(
                f"Analyzing {len(raw_files)} {doc_type} page(s)..."
            ))
            config = self.registry.config_for(doc_type)
            items = await self.extraction_client.transcribe(
                self.active_payloads, doc_type, config.prompt, config.columns,
            )
        except (ExtractionError, ConfigurationError) as e:
            self.logger.error("Extraction failed", exc=e.original_error or e)
            self._set_state(ProcessingState.error(e.message or "Unknown error occurred"))
            self.logger.run_result(False, type=doc_type)
            return self.state

        if not items:
            self.logger.warning("No rows extracted", files=len(raw_files), type=doc_type)
        self.active_items = items
        entry = self.history.record_session(
            history_label([p.file_name for p in self.active_payloads]), doc_type, items,
        )
        self.active_history_id = entry.id
        self.logger.milestone(f"History entry {entry.id}", label=entry.file_name, rows=len(items))
        self._set_state(ProcessingState.complete())
        self.logger.run_result(True, type=doc_type, rows=len(items))
        return self.state

    def select_history(self, entry_id: str) -> HistoryItem:
        """Load a past session into the active set.

        Raises:
            SessionStateError: While an extraction is in flight.
            KeyError: If the entry does not exist.
        """
        self._require_not_busy("open a history entry")
        entry = self.history.select_session(entry_id)

        self.active_items = list(entry.items)
        self.active_payloads = []
        self.active_doc_type = entry.doc_type
        self.active_history_id = entry.id
        self._set_state(ProcessingState.complete())
        self.logger.info(f"Opened history entry '{entry.file_name}'", rows=len(entry.items))
        return entry

    def new_upload(self) -> None:
        """Clear the active set and return to idle."""
        self._require_not_busy("start a new upload")
        self.active_items = []
        self.active_payloads = []
        self.active_history_id = None
        self._set_state(ProcessingState.idle())

    def delete_history(self, entry_id: str) -> bool:
        """Delete a history entry; resets the session if it was active."""
        deleted = self.history.delete_session(entry_id)
        self.logger.debug(f"Delete history {entry_id}", deleted=deleted)
        if deleted and entry_id == self.active_history_id:
            self.new_upload()
        return deleted

    # Edits

    def _sync(self) -> None:
        if self.active_history_id and self.state.status is ProcessingStatus.COMPLETE:
            self.history.sync_active_edits(self.active_history_id, self.active_items)

    def update_item(self, item_id: str, field: str, value: str) -> None:
        """Set one field of one active row. Unknown ids are ignored."""
        self.active_items = [
            item.with_field(field, value) if item.id == item_id else item
            for item in self.active_items
        ]
        self._sync()

    def delete_item(self, item_id: str) -> None:
        """Remove one active row. Unknown ids are ignored."""
        self.active_items = [item for item in self.active_items if item.id != item_id]
        self._sync()

    # Export

    def export_csv(self) -> CsvExport:
        """Render the active set as a CSV file.

        Raises:
            ValidationError: If there are no rows to export.
        """
        if not self.active_items:
            raise validation_error("There are no rows to export.", field_name="items")
        return CsvExport(
            file_name=export_filename(self.active_doc_type),
            media_type=CSV_MEDIA_TYPE,
            content=export_csv(self.active_items, self.active_columns),
        )
