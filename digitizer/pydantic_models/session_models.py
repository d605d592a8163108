"""Models for the session workflow: selected files and processing state."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProcessingStatus(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


class ProcessingState(BaseModel):
    """Tagged workflow state. `message` is set for processing and error."""

    model_config = ConfigDict(frozen=True)

    status: ProcessingStatus = ProcessingStatus.IDLE
    message: str | None = None

    @classmethod
    def idle(cls) -> "ProcessingState":
        return cls(status=ProcessingStatus.IDLE)

    @classmethod
    def uploading(cls) -> "ProcessingState":
        return cls(status=ProcessingStatus.UPLOADING)

    @classmethod
    def processing(cls, message: str) -> "ProcessingState":
        return cls(status=ProcessingStatus.PROCESSING, message=message)

    @classmethod
    def complete(cls) -> "ProcessingState":
        return cls(status=ProcessingStatus.COMPLETE)

    @classmethod
    def error(cls, message: str) -> "ProcessingState":
        return cls(status=ProcessingStatus.ERROR, message=message)

    @property
    def is_busy(self) -> bool:
        """True while an extraction is in flight."""
        return self.status in (ProcessingStatus.UPLOADING, ProcessingStatus.PROCESSING)


class RawFile(BaseModel):
    """A user-selected file before ingestion."""

    name: str
    media_type: str = ""
    data: bytes = Field(repr=False)


class FilePayload(BaseModel):
    """An ingested page ready to attach to the model request."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    media_type: str
    data_base64: str = Field(repr=False)
    preview: str = Field(default="", repr=False, description="data: URL, empty if unavailable")

    @property
    def data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.data_base64}"

    @property
    def is_pdf(self) -> bool:
        return self.media_type == "application/pdf"


class CsvExport(BaseModel):
    """A rendered CSV file ready to write or download."""

    file_name: str
    media_type: str
    content: bytes = Field(repr=False)
