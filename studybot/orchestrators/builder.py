from dataclasses import dataclass
from pathlib import Path

from studybot.config.settings import Settings
from studybot.database.repositories.chat_sessions_repository import ChatSessionsRepository
from studybot.database.repositories.notes_repository import NotesRepository
from studybot.database.repositories.past_papers_repository import PastPapersRepository
from studybot.database.repositories.profiles_repository import ProfilesRepository
from studybot.database.repositories.quizzes_repository import QuizzesRepository
from studybot.database.repositories.study_plans_repository import StudyPlansRepository
from studybot.database.repositories.study_tasks_repository import StudyTasksRepository
from studybot.extraction.factory import TextExtractorFactory
from studybot.normalization import NormalizerFactory
from studybot.orchestrators.chat import ChatOrchestrator
from studybot.orchestrators.insights import InsightsOrchestrator
from studybot.orchestrators.notes import NotesOrchestrator
from studybot.orchestrators.past_papers import PastPapersOrchestrator
from studybot.orchestrators.planner import PlannerOrchestrator
from studybot.orchestrators.profile import ProfileOrchestrator
from studybot.orchestrators.quizzes import QuizzesOrchestrator
from studybot.storage.file_store import FileStore


@dataclass(frozen=True)
class StudyBot:
    """Every feature orchestrator, wired to shared adapters."""

    notes: NotesOrchestrator
    quizzes: QuizzesOrchestrator
    past_papers: PastPapersOrchestrator
    planner: PlannerOrchestrator
    chat: ChatOrchestrator
    insights: InsightsOrchestrator
    profile: ProfileOrchestrator


def build_study_bot(
    settings: Settings,
    files_root: Path | None = None,
) -> StudyBot:
    """Build all orchestrators with the adapters selected by settings.

    Raises:
        ConfigurationError: unknown PDF engine or AI provider, or missing
            provider credentials.
    """
    extractor = TextExtractorFactory.create(settings)
    normalizer = NormalizerFactory.create(settings)
    file_store = FileStore(
        files_root=files_root if files_root is not None else Path(settings.files_root)
    )

    notes_repo = NotesRepository()
    quizzes_repo = QuizzesRepository()
    papers_repo = PastPapersRepository()
    plans_repo = StudyPlansRepository()
    tasks_repo = StudyTasksRepository()

    return StudyBot(
        notes=NotesOrchestrator(extractor, normalizer, notes_repo, file_store),
        quizzes=QuizzesOrchestrator(normalizer, quizzes_repo, notes_repo),
        past_papers=PastPapersOrchestrator(extractor, normalizer, papers_repo, file_store),
        planner=PlannerOrchestrator(normalizer, plans_repo, tasks_repo),
        chat=ChatOrchestrator(normalizer, ChatSessionsRepository()),
        insights=InsightsOrchestrator(notes_repo, quizzes_repo, papers_repo, tasks_repo),
        profile=ProfileOrchestrator(ProfilesRepository()),
    )
