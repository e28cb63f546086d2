from dataclasses import asdict

from studybot.context import UserContext
from studybot.database.models import QuizRecord
from studybot.database.repositories.notes_repository import NotesRepository
from studybot.database.repositories.quizzes_repository import QuizzesRepository
from studybot.errors import InputValidationError
from studybot.logging.logger import Log
from studybot.normalization.base import BaseNormalizer
from studybot.orchestrators.pipeline import Pipeline, PipelineContext, PipelineStep
from studybot.orchestrators.steps import (
    FinalizeStep,
    MarkFailedStep,
    ReloadStep,
    WritePendingStep,
)

QUESTION_COUNT = 5


class ValidateQuizInputStep(PipelineStep):
    def __init__(self, notes_repo: NotesRepository) -> None:
        self._notes_repo = notes_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        context.title = context.title.strip()
        if not context.title:
            raise InputValidationError("Please enter a topic")
        context.pending_values["questions"] = []
        note_id = context.inputs.get("note_id")
        if note_id:
            note = self._notes_repo.find_by_id(context.user, note_id)
            context.source_text = note.summary or note.original_text or ""
            context.pending_values["note_id"] = note_id
        return context


class NormalizeQuizStep(PipelineStep):
    def __init__(self, normalizer: BaseNormalizer, question_count: int) -> None:
        self._normalizer = normalizer
        self._question_count = question_count

    def run(self, context: PipelineContext) -> PipelineContext:
        result = self._normalizer.generate_quiz(
            context.title,
            self._question_count,
            context=context.source_text,
        )
        context.result = result
        context.final_values.update(
            questions=[asdict(question) for question in result.questions],
            total_questions=len(result.questions),
        )
        return context


def score_answers(questions: list[dict[str, object]], answers: list[int]) -> int:
    """Number of answers matching each question's correct option index."""
    return sum(
        1
        for question, answer in zip(questions, answers, strict=True)
        if question.get("correct_answer") == answer
    )


class QuizzesOrchestrator:
    """Quizzes: generate multiple-choice questions on a topic and grade attempts."""

    def __init__(
        self,
        normalizer: BaseNormalizer,
        quizzes_repo: QuizzesRepository,
        notes_repo: NotesRepository,
        question_count: int = QUESTION_COUNT,
    ) -> None:
        self._quizzes_repo = quizzes_repo
        self._pipeline = Pipeline(
            steps=[
                ValidateQuizInputStep(notes_repo),
                WritePendingStep(quizzes_repo),
                NormalizeQuizStep(normalizer, question_count),
                FinalizeStep(quizzes_repo),
                ReloadStep(quizzes_repo),
            ],
            failed_steps=[MarkFailedStep(quizzes_repo)],
        )

    def generate_quiz(
        self,
        user: UserContext,
        topic: str,
        note_id: str | None = None,
    ) -> QuizRecord:
        """Generate a quiz titled *topic*, optionally grounded on a note's summary."""
        context = self._pipeline.run(
            PipelineContext(user=user, title=topic, inputs={"note_id": note_id})
        )
        return context.record  # type: ignore[no-any-return]

    def submit_answers(self, user: UserContext, quiz_id: str, answers: list[int]) -> QuizRecord:
        """Grade one attempt and persist score, total and completion.

        Raises:
            InputValidationError: the quiz is already completed, has no
                questions, the answer count does not match, or an answer
                is not an option index of its question.
        """
        quiz = self._quizzes_repo.find_by_id(user, quiz_id)
        if quiz.completed:
            raise InputValidationError("This quiz has already been completed")
        if not quiz.questions:
            raise InputValidationError("This quiz has no questions")
        if len(answers) != len(quiz.questions):
            raise InputValidationError(
                f"Please answer all {len(quiz.questions)} questions"
            )
        for number, (question, answer) in enumerate(zip(quiz.questions, answers), start=1):
            options = question.get("options") or []
            if not 0 <= answer < len(options):
                raise InputValidationError(
                    f"Please choose one of the {len(options)} options for question {number}"
                )
        score = score_answers(quiz.questions, answers)
        Log.info("Quiz graded", id=quiz_id, score=score, total=len(quiz.questions))
        return self._quizzes_repo.update(
            user,
            quiz_id,
            {"score": score, "total_questions": len(quiz.questions), "completed": True},
        )

    def list_quizzes(self, user: UserContext) -> list[QuizRecord]:
        return self._quizzes_repo.find_all(user)

    def get_quiz(self, user: UserContext, quiz_id: str) -> QuizRecord:
        return self._quizzes_repo.find_by_id(user, quiz_id)

    def delete_quiz(self, user: UserContext, quiz_id: str) -> None:
        self._quizzes_repo.delete(user, quiz_id)
        Log.info(f"Deleted quiz {quiz_id}")
