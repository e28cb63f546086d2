from unittest.mock import MagicMock

import pytest

from studybot.context import UserContext
from studybot.database.exceptions import PersistenceError
from studybot.database.models import PastPaperRecord
from studybot.database.repositories.past_papers_repository import PastPapersRepository
from studybot.errors import InputValidationError
from studybot.extraction.exceptions import ExtractionFailureError
from studybot.extraction.extractor import TextExtractor
from studybot.extraction.models import Document
from studybot.normalization.models import PaperAnalysisResult, TopicPrediction
from studybot.orchestrators.past_papers import PastPapersOrchestrator
from studybot.storage.file_store import FileStore

USER = UserContext(user_id="u1")


def _make_orchestrator() -> (
    tuple[PastPapersOrchestrator, MagicMock, MagicMock, MagicMock, MagicMock]
):
    pdf_adapter = MagicMock()
    pdf_adapter.extract.return_value = "Q1. Define osmosis."
    extractor = TextExtractor(pdf_adapter, MagicMock(), max_upload_bytes=1024)
    normalizer = MagicMock()
    normalizer.analyze_paper.return_value = PaperAnalysisResult(
        analysis="Transport questions recur every year.",
        topics=["Osmosis"],
        predictions=[TopicPrediction(topic="Osmosis", likelihood="high", rationale="Every year")],
    )
    papers_repo = MagicMock(spec=PastPapersRepository)
    papers_repo.table = "past_papers"
    papers_repo.create.return_value = PastPaperRecord(
        id="p1", user_id=USER.user_id, title="Biology 2023", status="pending"
    )
    papers_repo.find_by_id.return_value = PastPaperRecord(
        id="p1", user_id=USER.user_id, title="Biology 2023", topics=["Osmosis"]
    )
    file_store = MagicMock(spec=FileStore)
    file_store.save.return_value = "u1/p1.pdf"
    orchestrator = PastPapersOrchestrator(extractor, normalizer, papers_repo, file_store)
    return orchestrator, pdf_adapter, normalizer, papers_repo, file_store


def test_analyze_paper_stores_topics_and_predictions() -> None:
    orchestrator, _pdf, normalizer, papers_repo, _store = _make_orchestrator()

    paper = orchestrator.analyze_paper(USER, "Biology 2023", text="Q1. Define osmosis.")

    assert paper.topics == ["Osmosis"]
    normalizer.analyze_paper.assert_called_once_with("Biology 2023", "Q1. Define osmosis.")
    final_values = papers_repo.update.call_args.args[2]
    assert final_values["predictions"] == [
        {"topic": "Osmosis", "likelihood": "high", "rationale": "Every year"}
    ]
    assert final_values["analysis"] == "Transport questions recur every year."
    assert final_values["status"] == "ready"


def test_analyze_paper_from_upload_saves_file() -> None:
    orchestrator, pdf_adapter, normalizer, papers_repo, file_store = _make_orchestrator()
    upload = Document.from_upload("bio-2023.pdf", b"%PDF")

    orchestrator.analyze_paper(USER, "Biology 2023", upload=upload)

    pdf_adapter.extract.assert_called_once_with(b"%PDF")
    assert papers_repo.create.call_args.args[1]["file_name"] == "bio-2023.pdf"
    file_store.save.assert_called_once_with(USER, upload)
    assert papers_repo.update.call_args.args[2]["file_path"] == "u1/p1.pdf"


@pytest.mark.parametrize(("title", "text"), [("", "content"), ("Biology", "  ")])
def test_requires_title_and_content(title: str, text: str) -> None:
    orchestrator, _pdf, normalizer, papers_repo, _store = _make_orchestrator()

    with pytest.raises(InputValidationError, match="Please provide both title and content"):
        orchestrator.analyze_paper(USER, title, text=text)

    papers_repo.create.assert_not_called()
    normalizer.analyze_paper.assert_not_called()


def test_scanned_upload_fails_before_pending_row() -> None:
    orchestrator, pdf_adapter, normalizer, papers_repo, _store = _make_orchestrator()
    pdf_adapter.extract.return_value = ""

    with pytest.raises(ExtractionFailureError):
        orchestrator.analyze_paper(
            USER, "Scan", upload=Document.from_upload("scan.pdf", b"%PDF")
        )

    papers_repo.create.assert_not_called()
    normalizer.analyze_paper.assert_not_called()


def test_delete_paper_removes_stored_file() -> None:
    orchestrator, _pdf, _norm, papers_repo, file_store = _make_orchestrator()
    papers_repo.find_by_id.return_value = PastPaperRecord(
        id="p1", user_id=USER.user_id, title="Biology 2023", file_path="u1/p1.pdf"
    )

    orchestrator.delete_paper(USER, "p1")

    papers_repo.delete.assert_called_once_with(USER, "p1")
    file_store.delete.assert_called_once_with(USER, "u1/p1.pdf")


def test_delete_paper_without_file() -> None:
    orchestrator, _pdf, _norm, papers_repo, file_store = _make_orchestrator()

    orchestrator.delete_paper(USER, "p1")

    papers_repo.delete.assert_called_once_with(USER, "p1")
    file_store.delete.assert_not_called()


def test_finalize_failure_discards_stored_upload() -> None:
    orchestrator, _pdf, _norm, papers_repo, file_store = _make_orchestrator()
    papers_repo.update.side_effect = [PersistenceError("connection lost"), None]

    with pytest.raises(PersistenceError):
        orchestrator.analyze_paper(
            USER, "Biology 2023", upload=Document.from_upload("bio-2023.pdf", b"%PDF")
        )

    assert papers_repo.update.call_args.args[2] == {
        "status": "failed",
        "error_message": "connection lost",
    }
    file_store.delete.assert_called_once_with(USER, "u1/p1.pdf")
