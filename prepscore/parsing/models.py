from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ACCEPTED_MIME_TYPES = {PDF_MIME: "pdf", DOCX_MIME: "docx"}


class Document(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    content: bytes
    mime_type: str

    @field_validator("mime_type")
    @classmethod
    def _normalize_mime_type(cls, value: str) -> str:
        return value.split(";", 1)[0].strip().lower()

    @property
    def source_type(self) -> str | None:
        return ACCEPTED_MIME_TYPES.get(self.mime_type)
