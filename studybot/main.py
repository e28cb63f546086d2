import argparse
import json
import sys
from collections.abc import Sequence
from dataclasses import asdict, is_dataclass
from datetime import date
from pathlib import Path
from typing import Any

from studybot.config.settings import Settings
from studybot.context import UserContext
from studybot.database.connection import close_pool, init_pool
from studybot.errors import InputValidationError, StudyBotError
from studybot.extraction.models import Document
from studybot.logging.logger import Log
from studybot.orchestrators.builder import StudyBot, build_study_bot


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="studybot",
        description="Study notes, quizzes, past papers, plans and tutoring chat.",
    )
    parser.add_argument("--user", required=True, help="Id of the user to act for")
    parser.add_argument("--email", default=None, help="Email of the user to act for")
    commands = parser.add_subparsers(dest="command", required=True)

    note = commands.add_parser("note", help="Manage notes").add_subparsers(
        dest="action", required=True
    )
    create = note.add_parser("create", help="Summarize pasted text and/or a file")
    create.add_argument("--title", default="")
    create.add_argument("--text", default="")
    create.add_argument("--file", type=Path, default=None, help="PDF or DOCX file")
    note.add_parser("list")
    show = note.add_parser("show")
    show.add_argument("id")
    download = note.add_parser("download", help="Save the note's uploaded file")
    download.add_argument("id")
    download.add_argument(
        "--output", type=Path, default=None, help="Target path (default: original file name)"
    )
    delete = note.add_parser("delete")
    delete.add_argument("id")

    quiz = commands.add_parser("quiz", help="Generate and take quizzes").add_subparsers(
        dest="action", required=True
    )
    generate = quiz.add_parser("generate")
    generate.add_argument("topic")
    generate.add_argument("--note", default=None, help="Base the quiz on this note")
    answer = quiz.add_parser("answer", help="Submit one option index per question")
    answer.add_argument("id")
    answer.add_argument("answers", type=int, nargs="+")
    quiz.add_parser("list")
    delete = quiz.add_parser("delete")
    delete.add_argument("id")

    paper = commands.add_parser("paper", help="Analyze past papers").add_subparsers(
        dest="action", required=True
    )
    analyze = paper.add_parser("analyze")
    analyze.add_argument("--title", required=True)
    analyze.add_argument("--text", default="")
    analyze.add_argument("--file", type=Path, default=None, help="PDF or DOCX file")
    paper.add_parser("list")
    delete = paper.add_parser("delete")
    delete.add_argument("id")

    plan = commands.add_parser("plan", help="Study plans and tasks").add_subparsers(
        dest="action", required=True
    )
    generate = plan.add_parser("generate")
    generate.add_argument("topic")
    generate.add_argument("exam_date", type=date.fromisoformat, help="YYYY-MM-DD")
    add = plan.add_parser("add", help="Add a task by hand")
    add.add_argument("title")
    add.add_argument("date", type=date.fromisoformat, help="YYYY-MM-DD")
    add.add_argument("--description", default="")
    toggle = plan.add_parser("toggle")
    toggle.add_argument("id")
    plan.add_parser("tasks")
    delete = plan.add_parser("delete", help="Delete a task")
    delete.add_argument("id")

    chat = commands.add_parser("chat", help="Ask the tutor")
    chat.add_argument("message")
    chat.add_argument("--new", action="store_true", help="Start a new session")

    commands.add_parser("stats", help="Dashboard counts and quiz performance")
    return parser


def _read_upload(path: Path | None) -> Document | None:
    if path is None:
        return None
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise InputValidationError(f"Could not read {path}: {exc.strerror}") from exc
    return Document.from_upload(path.name, content)


def _write_download(path: Path, content: bytes) -> Path:
    try:
        path.write_bytes(content)
    except OSError as exc:
        raise InputValidationError(f"Could not write {path}: {exc.strerror}") from exc
    return path


def _print(value: Any) -> None:
    if isinstance(value, list):
        payload: Any = [asdict(item) for item in value]
    elif is_dataclass(value) and not isinstance(value, type):
        payload = asdict(value)
    else:
        payload = value
    print(json.dumps(payload, indent=2, default=str, ensure_ascii=False))


def run_command(bot: StudyBot, user: UserContext, args: argparse.Namespace) -> Any:
    """Dispatch parsed arguments to an orchestrator and return what to print."""
    command, action = args.command, getattr(args, "action", None)
    if command == "note":
        if action == "create":
            return bot.notes.create_note(user, args.title, args.text, _read_upload(args.file))
        if action == "list":
            return bot.notes.list_notes(user)
        if action == "show":
            return bot.notes.get_note(user, args.id)
        if action == "download":
            file_name, content = bot.notes.get_note_file(user, args.id)
            target = args.output or Path(Path(file_name).name)
            return {"saved": str(_write_download(target, content))}
        bot.notes.delete_note(user, args.id)
        return {"deleted": args.id}
    if command == "quiz":
        if action == "generate":
            return bot.quizzes.generate_quiz(user, args.topic, note_id=args.note)
        if action == "answer":
            return bot.quizzes.submit_answers(user, args.id, args.answers)
        if action == "list":
            return bot.quizzes.list_quizzes(user)
        bot.quizzes.delete_quiz(user, args.id)
        return {"deleted": args.id}
    if command == "paper":
        if action == "analyze":
            return bot.past_papers.analyze_paper(
                user, args.title, args.text, _read_upload(args.file)
            )
        if action == "list":
            return bot.past_papers.list_papers(user)
        bot.past_papers.delete_paper(user, args.id)
        return {"deleted": args.id}
    if command == "plan":
        if action == "generate":
            plan = bot.planner.generate_plan(user, args.topic, args.exam_date)
            tasks = bot.planner.list_tasks(user)
            return {"plan": asdict(plan), "tasks": [asdict(task) for task in tasks]}
        if action == "add":
            return bot.planner.add_task(user, args.title, args.date, args.description)
        if action == "toggle":
            return bot.planner.toggle_task(user, args.id)
        if action == "tasks":
            return bot.planner.list_tasks(user)
        bot.planner.delete_task(user, args.id)
        return {"deleted": args.id}
    if command == "chat":
        session = bot.chat.new_session(user) if args.new else bot.chat.open_session(user)
        session = bot.chat.send_message(user, session.id, args.message)
        return session.messages[-1]
    return {
        "dashboard": asdict(bot.insights.dashboard(user)),
        "quiz_performance": asdict(bot.insights.quiz_performance(user)),
    }


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: parse args -> initialize pool -> build orchestrators -> run one command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        bot = build_study_bot(settings)
        user = UserContext(user_id=args.user, email=args.email)
        _print(run_command(bot, user, args))
    except StudyBotError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        close_pool()
    return 0


if __name__ == "__main__":
    sys.exit(main())
