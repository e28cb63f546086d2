from dataclasses import dataclass, field

from studybot.context import UserContext
from studybot.database.repositories.notes_repository import NotesRepository
from studybot.database.repositories.past_papers_repository import PastPapersRepository
from studybot.database.repositories.quizzes_repository import QuizzesRepository
from studybot.database.repositories.study_tasks_repository import StudyTasksRepository


@dataclass(frozen=True)
class DashboardStats:
    notes: int
    quizzes: int
    past_papers: int
    study_tasks: int


@dataclass(frozen=True)
class QuizScore:
    quiz_id: str
    title: str
    score: int
    total_questions: int
    percentage: int


@dataclass(frozen=True)
class QuizPerformance:
    """Per-quiz percentages, oldest first, and the overall percentage.

    The overall figure weights each quiz by its question count.
    """

    scores: list[QuizScore] = field(default_factory=list)
    average_percentage: int = 0


class InsightsOrchestrator:
    def __init__(
        self,
        notes_repo: NotesRepository,
        quizzes_repo: QuizzesRepository,
        papers_repo: PastPapersRepository,
        tasks_repo: StudyTasksRepository,
    ) -> None:
        self._notes_repo = notes_repo
        self._quizzes_repo = quizzes_repo
        self._papers_repo = papers_repo
        self._tasks_repo = tasks_repo

    def dashboard(self, user: UserContext) -> DashboardStats:
        return DashboardStats(
            notes=self._notes_repo.count(user),
            quizzes=self._quizzes_repo.count(user),
            past_papers=self._papers_repo.count(user),
            study_tasks=self._tasks_repo.count(user),
        )

    def quiz_performance(self, user: UserContext) -> QuizPerformance:
        quizzes = self._quizzes_repo.find_all(user, descending=False, completed=True)
        scores = [
            QuizScore(
                quiz_id=quiz.id,
                title=quiz.title,
                score=quiz.score or 0,
                total_questions=quiz.total_questions,
                percentage=round(100 * (quiz.score or 0) / quiz.total_questions),
            )
            for quiz in quizzes
            if quiz.total_questions
        ]
        if not scores:
            return QuizPerformance()
        total_score = sum(score.score for score in scores)
        total_questions = sum(score.total_questions for score in scores)
        average = round(100 * total_score / total_questions)
        return QuizPerformance(scores=scores, average_percentage=average)
