"""Wire and value models shared by the client pipeline and the gateway."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class UploadedAudioRef:
    """Where an uploaded recording lives. Immutable once the upload succeeds."""
    user_id: str
    file_name: str
    path: str
    public_url: str
    size: int
    content_type: str


class ProcessAudioRequest(BaseModel):
    """Request body of the process-audio endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    audio_url: str = Field(alias="audioUrl", min_length=1)
    file_name: str = Field(alias="fileName", min_length=1)
    user_id: str = Field(alias="userId", min_length=1)
    file_size: int | None = Field(default=None, alias="fileSize", ge=0)

    @classmethod
    def from_ref(cls, ref: UploadedAudioRef) -> "ProcessAudioRequest":
        return cls(
            audio_url=ref.public_url,
            file_name=ref.file_name,
            user_id=ref.user_id,
            file_size=ref.size,
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class TranscriptionResult(BaseModel):
    """Transcript text plus optional enrichment, or an error marker for degraded delivery."""

    model_config = ConfigDict(populate_by_name=True)

    transcription: str = ""
    summary: str | None = None
    action_items: list[str] | None = Field(default=None, alias="actionItems")
    error: str | None = None
    message: str | None = None

    @property
    def degraded(self) -> bool:
        """True when this result carries synthetic or fallback content."""
        return bool(self.error)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
