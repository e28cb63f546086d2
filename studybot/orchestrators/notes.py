from dataclasses import asdict
from pathlib import PurePosixPath

from studybot.context import UserContext
from studybot.database.models import NoteRecord
from studybot.database.repositories.notes_repository import NotesRepository
from studybot.errors import InputValidationError
from studybot.extraction.extractor import TextExtractor
from studybot.extraction.models import Document
from studybot.logging.logger import Log
from studybot.normalization.base import BaseNormalizer
from studybot.orchestrators.pipeline import Pipeline, PipelineContext, PipelineStep
from studybot.orchestrators.steps import (
    DiscardUploadStep,
    ExtractTextStep,
    FinalizeStep,
    MarkFailedStep,
    ReloadStep,
    StoreUploadStep,
    ValidateUploadStep,
    WritePendingStep,
)
from studybot.storage.file_store import FileStore


class ValidateNoteInputStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        if not context.text.strip() and context.upload is None:
            raise InputValidationError("Please provide text or upload a PDF or DOCX file")
        context.title = context.title.strip() or (
            context.upload.stem if context.upload is not None else ""
        )
        if not context.title:
            raise InputValidationError("Please provide a title")
        if context.upload is not None:
            context.pending_values["file_name"] = context.upload.file_name
        return context


class NormalizeNoteStep(PipelineStep):
    def __init__(self, normalizer: BaseNormalizer) -> None:
        self._normalizer = normalizer

    def run(self, context: PipelineContext) -> PipelineContext:
        result = self._normalizer.process_note(context.title, context.source_text)
        context.result = result
        context.final_values.update(
            summary=result.summary,
            keywords=result.keywords,
            mindmap=asdict(result.mindmap) if result.mindmap is not None else None,
        )
        return context


class NotesOrchestrator:
    """Notes: upload or paste study material, summarize it, keep it."""

    def __init__(
        self,
        extractor: TextExtractor,
        normalizer: BaseNormalizer,
        notes_repo: NotesRepository,
        file_store: FileStore,
    ) -> None:
        self._notes_repo = notes_repo
        self._file_store = file_store
        self._pipeline = Pipeline(
            steps=[
                ValidateNoteInputStep(),
                ValidateUploadStep(extractor),
                ExtractTextStep(extractor),
                WritePendingStep(notes_repo, text_column="original_text"),
                NormalizeNoteStep(normalizer),
                StoreUploadStep(file_store),
                FinalizeStep(notes_repo),
                ReloadStep(notes_repo),
            ],
            failed_steps=[MarkFailedStep(notes_repo), DiscardUploadStep(file_store)],
        )

    def create_note(
        self,
        user: UserContext,
        title: str,
        text: str = "",
        upload: Document | None = None,
    ) -> NoteRecord:
        """Create a note from pasted text, an uploaded file, or both.

        Raises:
            InputValidationError: no title, or neither text nor upload.
            UnsupportedFormatError: the upload is not a PDF or DOCX file.
            ExtractionFailureError: the upload has no readable text.
            UpstreamError: the AI provider call failed; the note is kept as failed.
        """
        context = self._pipeline.run(
            PipelineContext(user=user, title=title, text=text, upload=upload)
        )
        return context.record  # type: ignore[no-any-return]

    def list_notes(self, user: UserContext) -> list[NoteRecord]:
        return self._notes_repo.find_all(user)

    def get_note(self, user: UserContext, note_id: str) -> NoteRecord:
        return self._notes_repo.find_by_id(user, note_id)

    def get_note_file(self, user: UserContext, note_id: str) -> tuple[str, bytes]:
        """Original file name and bytes of the note's upload.

        Raises:
            InputValidationError: the note was created from pasted text only.
        """
        note = self._notes_repo.find_by_id(user, note_id)
        if not note.file_path:
            raise InputValidationError("This note has no uploaded file")
        content = self._file_store.load(user, note.file_path)
        return note.file_name or PurePosixPath(note.file_path).name, content

    def update_note(
        self,
        user: UserContext,
        note_id: str,
        *,
        title: str | None = None,
        summary: str | None = None,
        keywords: list[str] | None = None,
    ) -> NoteRecord:
        """Overwrite only the given fields."""
        values: dict[str, object] = {}
        if title is not None:
            if not title.strip():
                raise InputValidationError("Please provide a title")
            values["title"] = title.strip()
        if summary is not None:
            values["summary"] = summary
        if keywords is not None:
            values["keywords"] = keywords
        return self._notes_repo.update(user, note_id, values)

    def delete_note(self, user: UserContext, note_id: str) -> None:
        """Delete the note and its stored upload."""
        note = self._notes_repo.find_by_id(user, note_id)
        self._notes_repo.delete(user, note_id)
        if note.file_path:
            self._file_store.delete(user, note.file_path)
        Log.info(f"Deleted note {note_id}")
