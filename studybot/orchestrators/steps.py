from typing import Any

from studybot.database.models import ArtifactStatus
from studybot.database.repositories.base_repository import BaseRepository
from studybot.extraction.extractor import TextExtractor
from studybot.logging.logger import Log
from studybot.orchestrators.pipeline import PipelineContext, PipelineStep
from studybot.storage.file_store import FileStore

TEXT_SEPARATOR = "\n\n"


def combine_text(pasted: str, extracted: str) -> str:
    """Pasted text first, then extracted text, separated by a blank line."""
    return TEXT_SEPARATOR.join(part for part in (pasted.strip(), extracted.strip()) if part)


class ValidateUploadStep(PipelineStep):
    def __init__(self, extractor: TextExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.upload is not None:
            self._extractor.validate(context.upload)
        return context


class ExtractTextStep(PipelineStep):
    def __init__(self, extractor: TextExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        extracted = ""
        if context.upload is not None:
            extracted = self._extractor.extract(context.upload)
        context.source_text = combine_text(context.text, extracted)
        return context


class WritePendingStep(PipelineStep):
    def __init__(self, repo: BaseRepository[Any], text_column: str | None = None) -> None:
        self._repo = repo
        self._text_column = text_column

    def run(self, context: PipelineContext) -> PipelineContext:
        if self._text_column is not None:
            context.pending_values[self._text_column] = context.source_text
        record = self._repo.create(
            context.user,
            {
                "title": context.title,
                "status": ArtifactStatus.PENDING.value,
                **context.pending_values,
            },
        )
        context.artifact_id = record.id
        Log.info("Created pending row", table=self._repo.table, id=record.id)
        return context


class StoreUploadStep(PipelineStep):
    def __init__(self, file_store: FileStore) -> None:
        self._file_store = file_store

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.upload is not None:
            context.final_values["file_path"] = self._file_store.save(
                context.user, context.upload
            )
        return context


class FinalizeStep(PipelineStep):
    def __init__(self, repo: BaseRepository[Any]) -> None:
        self._repo = repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.artifact_id is None:
            raise ValueError("PipelineContext.artifact_id must be set before finalize")
        self._repo.update(
            context.user,
            context.artifact_id,
            {
                **context.final_values,
                "status": ArtifactStatus.READY.value,
                "error_message": None,
            },
        )
        context.finalized = True
        Log.info("Row is ready", table=self._repo.table, id=context.artifact_id)
        return context


class ReloadStep(PipelineStep):
    def __init__(self, repo: BaseRepository[Any]) -> None:
        self._repo = repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.artifact_id is None:
            raise ValueError("PipelineContext.artifact_id must be set before reload")
        context.record = self._repo.find_by_id(context.user, context.artifact_id)
        return context


class MarkFailedStep(PipelineStep):
    def __init__(self, repo: BaseRepository[Any]) -> None:
        self._repo = repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.artifact_id is None:
            return context
        self._repo.update(
            context.user,
            context.artifact_id,
            {
                "status": ArtifactStatus.FAILED.value,
                "error_message": context.error_message,
            },
        )
        Log.error(
            f"{self._repo.table} row {context.artifact_id} marked as failed: "
            f"{context.error_message}"
        )
        return context


class DiscardUploadStep(PipelineStep):
    """Removes an upload stored for a row that never became ready."""

    def __init__(self, file_store: FileStore) -> None:
        self._file_store = file_store

    def run(self, context: PipelineContext) -> PipelineContext:
        file_path = context.final_values.pop("file_path", None)
        if file_path:
            self._file_store.delete(context.user, file_path)
        return context
