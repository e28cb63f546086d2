from dataclasses import asdict

from studybot.context import UserContext
from studybot.database.models import PastPaperRecord
from studybot.database.repositories.past_papers_repository import PastPapersRepository
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


class ValidatePaperInputStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        context.title = context.title.strip()
        if not context.title or (not context.text.strip() and context.upload is None):
            raise InputValidationError("Please provide both title and content")
        if context.upload is not None:
            context.pending_values["file_name"] = context.upload.file_name
        return context


class NormalizePaperStep(PipelineStep):
    def __init__(self, normalizer: BaseNormalizer) -> None:
        self._normalizer = normalizer

    def run(self, context: PipelineContext) -> PipelineContext:
        result = self._normalizer.analyze_paper(context.title, context.source_text)
        context.result = result
        context.final_values.update(
            topics=result.topics,
            predictions=[asdict(prediction) for prediction in result.predictions],
            analysis=result.analysis,
        )
        return context


class PastPapersOrchestrator:
    """Past papers: find recurring topics and predict the next exam's."""

    def __init__(
        self,
        extractor: TextExtractor,
        normalizer: BaseNormalizer,
        papers_repo: PastPapersRepository,
        file_store: FileStore,
    ) -> None:
        self._papers_repo = papers_repo
        self._file_store = file_store
        self._pipeline = Pipeline(
            steps=[
                ValidatePaperInputStep(),
                ValidateUploadStep(extractor),
                ExtractTextStep(extractor),
                WritePendingStep(papers_repo),
                NormalizePaperStep(normalizer),
                StoreUploadStep(file_store),
                FinalizeStep(papers_repo),
                ReloadStep(papers_repo),
            ],
            failed_steps=[MarkFailedStep(papers_repo), DiscardUploadStep(file_store)],
        )

    def analyze_paper(
        self,
        user: UserContext,
        title: str,
        text: str = "",
        upload: Document | None = None,
    ) -> PastPaperRecord:
        context = self._pipeline.run(
            PipelineContext(user=user, title=title, text=text, upload=upload)
        )
        return context.record  # type: ignore[no-any-return]

    def list_papers(self, user: UserContext) -> list[PastPaperRecord]:
        return self._papers_repo.find_all(user)

    def get_paper(self, user: UserContext, paper_id: str) -> PastPaperRecord:
        return self._papers_repo.find_by_id(user, paper_id)

    def delete_paper(self, user: UserContext, paper_id: str) -> None:
        paper = self._papers_repo.find_by_id(user, paper_id)
        self._papers_repo.delete(user, paper_id)
        if paper.file_path:
            self._file_store.delete(user, paper.file_path)
        Log.info(f"Deleted past paper {paper_id}")
