from unittest.mock import MagicMock

import pytest

from studybot.context import UserContext
from studybot.database.exceptions import PersistenceError
from studybot.database.models import ArtifactStatus
from studybot.extraction.exceptions import UnsupportedFormatError
from studybot.extraction.models import Document
from studybot.orchestrators.pipeline import Pipeline, PipelineContext, PipelineStep
from studybot.orchestrators.steps import (
    DiscardUploadStep,
    ExtractTextStep,
    FinalizeStep,
    MarkFailedStep,
    StoreUploadStep,
    ValidateUploadStep,
    WritePendingStep,
    combine_text,
)

USER = UserContext(user_id="u1")


class _SetArtifactStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        context.artifact_id = "a1"
        return context


class _FailingStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        raise RuntimeError("provider exploded")


class TestPipeline:
    def test_runs_steps_in_order(self) -> None:
        calls: list[str] = []

        class _Recorder(PipelineStep):
            def __init__(self, name: str) -> None:
                self._name = name

            def run(self, context: PipelineContext) -> PipelineContext:
                calls.append(self._name)
                return context

        failed_step = MagicMock()
        Pipeline(steps=[_Recorder("a"), _Recorder("b")], failed_steps=[failed_step]).run(
            PipelineContext(user=USER)
        )

        assert calls == ["a", "b"]
        failed_step.run.assert_not_called()

    def test_marks_failed_and_reraises_after_write_ahead(self) -> None:
        failed_step = MagicMock()
        pipeline = Pipeline(steps=[_SetArtifactStep(), _FailingStep()], failed_steps=[failed_step])

        with pytest.raises(RuntimeError, match="provider exploded"):
            pipeline.run(PipelineContext(user=USER))

        context = failed_step.run.call_args.args[0]
        assert context.artifact_id == "a1"
        assert context.error_message == "provider exploded"

    def test_does_not_mark_failed_before_write_ahead(self) -> None:
        failed_step = MagicMock()
        pipeline = Pipeline(steps=[_FailingStep()], failed_steps=[failed_step])

        with pytest.raises(RuntimeError):
            pipeline.run(PipelineContext(user=USER))

        failed_step.run.assert_not_called()

    def test_failed_steps_all_run_when_one_raises(self) -> None:
        first, second = MagicMock(), MagicMock()
        first.run.side_effect = PersistenceError("db down")
        pipeline = Pipeline(
            steps=[_SetArtifactStep(), _FailingStep()], failed_steps=[first, second]
        )

        with pytest.raises(RuntimeError, match="provider exploded"):
            pipeline.run(PipelineContext(user=USER))

        second.run.assert_called_once()

    def test_failure_after_finalize_leaves_row_alone(self) -> None:
        class _FinalizedStep(PipelineStep):
            def run(self, context: PipelineContext) -> PipelineContext:
                context.finalized = True
                return context

        failed_step = MagicMock()
        pipeline = Pipeline(
            steps=[_SetArtifactStep(), _FinalizedStep(), _FailingStep()],
            failed_steps=[failed_step],
        )

        with pytest.raises(RuntimeError):
            pipeline.run(PipelineContext(user=USER))

        failed_step.run.assert_not_called()

    def test_original_error_wins_when_marking_fails(self) -> None:
        failed_step = MagicMock()
        failed_step.run.side_effect = PersistenceError("db down")
        pipeline = Pipeline(steps=[_SetArtifactStep(), _FailingStep()], failed_steps=[failed_step])

        with pytest.raises(RuntimeError, match="provider exploded"):
            pipeline.run(PipelineContext(user=USER))


class TestCombineText:
    def test_pasted_text_first(self) -> None:
        assert combine_text("pasted", "extracted") == "pasted\n\nextracted"

    def test_only_one_part(self) -> None:
        assert combine_text("  ", "extracted") == "extracted"
        assert combine_text("pasted", "") == "pasted"


class TestSteps:
    def test_validate_upload_skips_without_upload(self) -> None:
        extractor = MagicMock()
        ValidateUploadStep(extractor).run(PipelineContext(user=USER))
        extractor.validate.assert_not_called()

    def test_validate_upload_propagates_rejection(self) -> None:
        extractor = MagicMock()
        extractor.validate.side_effect = UnsupportedFormatError("nope")
        context = PipelineContext(user=USER, upload=Document.from_upload("a.txt", b"x"))
        with pytest.raises(UnsupportedFormatError):
            ValidateUploadStep(extractor).run(context)

    def test_extract_combines_pasted_and_extracted(self) -> None:
        extractor = MagicMock()
        extractor.extract.return_value = "from file"
        context = PipelineContext(
            user=USER, text="typed", upload=Document.from_upload("a.pdf", b"%PDF")
        )
        assert ExtractTextStep(extractor).run(context).source_text == "typed\n\nfrom file"

    def test_write_pending_creates_row(self) -> None:
        repo = MagicMock()
        repo.create.return_value.id = "n1"
        context = PipelineContext(user=USER, title="T", source_text="body")

        WritePendingStep(repo, text_column="original_text").run(context)

        assert context.artifact_id == "n1"
        repo.create.assert_called_once_with(
            USER,
            {"title": "T", "status": ArtifactStatus.PENDING.value, "original_text": "body"},
        )

    def test_store_upload_records_path(self) -> None:
        file_store = MagicMock()
        file_store.save.return_value = "u1/x.pdf"
        upload = Document.from_upload("a.pdf", b"%PDF")
        context = StoreUploadStep(file_store).run(PipelineContext(user=USER, upload=upload))
        assert context.final_values == {"file_path": "u1/x.pdf"}
        file_store.save.assert_called_once_with(USER, upload)

    def test_finalize_sets_ready(self) -> None:
        repo = MagicMock()
        context = PipelineContext(user=USER, artifact_id="n1", final_values={"summary": "s"})

        FinalizeStep(repo).run(context)

        repo.update.assert_called_once_with(
            USER, "n1", {"summary": "s", "status": "ready", "error_message": None}
        )
        assert context.finalized

    def test_mark_failed_records_message(self) -> None:
        repo = MagicMock()
        context = PipelineContext(user=USER, artifact_id="n1", error_message="boom")

        MarkFailedStep(repo).run(context)

        repo.update.assert_called_once_with(
            USER, "n1", {"status": "failed", "error_message": "boom"}
        )

    def test_discard_upload_deletes_stored_file(self) -> None:
        file_store = MagicMock()
        context = PipelineContext(
            user=USER, artifact_id="n1", final_values={"file_path": "u1/x.pdf"}
        )

        DiscardUploadStep(file_store).run(context)

        file_store.delete.assert_called_once_with(USER, "u1/x.pdf")
        assert "file_path" not in context.final_values

    def test_discard_upload_without_stored_file(self) -> None:
        file_store = MagicMock()

        DiscardUploadStep(file_store).run(PipelineContext(user=USER, artifact_id="n1"))

        file_store.delete.assert_not_called()
