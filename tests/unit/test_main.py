from datetime import date
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from studybot.context import UserContext
from studybot.database.models import ChatSessionRecord, NoteRecord
from studybot.errors import InputValidationError
from studybot.extraction.models import MediaType
from studybot.main import build_parser, main, run_command

USER = UserContext(user_id="u1")


def _parse(*argv: str):
    return build_parser().parse_args(["--user", "u1", *argv])


class TestParser:
    def test_requires_user(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["note", "list"])

    def test_parses_answers_as_ints(self) -> None:
        args = _parse("quiz", "answer", "q1", "0", "2", "1")
        assert args.answers == [0, 2, 1]

    def test_parses_exam_date(self) -> None:
        args = _parse("plan", "generate", "Biology", "2026-06-01")
        assert args.exam_date == date(2026, 6, 1)

    def test_rejects_bad_date(self) -> None:
        with pytest.raises(SystemExit):
            _parse("plan", "add", "Revise", "next week")


class TestRunCommand:
    def test_note_create_reads_file(self, tmp_path: Path) -> None:
        pdf = tmp_path / "chapter.pdf"
        pdf.write_bytes(b"%PDF")
        bot = MagicMock()

        run_command(bot, USER, _parse("note", "create", "--file", str(pdf)))

        user, title, text, upload = bot.notes.create_note.call_args.args
        assert user == USER
        assert (title, text) == ("", "")
        assert upload.file_name == "chapter.pdf"
        assert upload.media_type is MediaType.PDF

    def test_missing_file_is_input_error(self, tmp_path: Path) -> None:
        with pytest.raises(InputValidationError, match="Could not read"):
            run_command(
                MagicMock(), USER, _parse("note", "create", "--file", str(tmp_path / "nope.pdf"))
            )

    def test_note_download_writes_file(self, tmp_path: Path) -> None:
        bot = MagicMock()
        bot.notes.get_note_file.return_value = ("chapter.pdf", b"%PDF")
        target = tmp_path / "out.pdf"

        result = run_command(bot, USER, _parse("note", "download", "n1", "--output", str(target)))

        assert result == {"saved": str(target)}
        assert target.read_bytes() == b"%PDF"
        bot.notes.get_note_file.assert_called_once_with(USER, "n1")

    def test_note_download_defaults_to_stored_name(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        bot = MagicMock()
        bot.notes.get_note_file.return_value = ("chapter.pdf", b"%PDF")

        run_command(bot, USER, _parse("note", "download", "n1"))

        assert (tmp_path / "chapter.pdf").read_bytes() == b"%PDF"

    def test_note_download_unwritable_target_is_input_error(self, tmp_path: Path) -> None:
        bot = MagicMock()
        bot.notes.get_note_file.return_value = ("chapter.pdf", b"%PDF")
        target = tmp_path / "missing" / "out.pdf"

        with pytest.raises(InputValidationError, match="Could not write"):
            run_command(bot, USER, _parse("note", "download", "n1", "--output", str(target)))

    def test_quiz_answer(self) -> None:
        bot = MagicMock()

        run_command(bot, USER, _parse("quiz", "answer", "q1", "0", "1"))

        bot.quizzes.submit_answers.assert_called_once_with(USER, "q1", [0, 1])

    def test_delete_returns_id(self) -> None:
        bot = MagicMock()

        assert run_command(bot, USER, _parse("paper", "delete", "p1")) == {"deleted": "p1"}
        bot.past_papers.delete_paper.assert_called_once_with(USER, "p1")

    def test_chat_returns_reply(self) -> None:
        bot = MagicMock()
        session = ChatSessionRecord(id="s1", user_id="u1")
        bot.chat.open_session.return_value = session
        bot.chat.send_message.return_value = ChatSessionRecord(
            id="s1",
            user_id="u1",
            messages=[
                {"role": "user", "content": "Hi"},
                {"role": "assistant", "content": "Hello!"},
            ],
        )

        reply = run_command(bot, USER, _parse("chat", "Hi"))

        assert reply == {"role": "assistant", "content": "Hello!"}
        bot.chat.send_message.assert_called_once_with(USER, "s1", "Hi")
        bot.chat.new_session.assert_not_called()


class TestMain:
    @patch("studybot.main.close_pool")
    @patch("studybot.main.init_pool")
    @patch("studybot.main.build_study_bot")
    def test_prints_json_and_returns_zero(
        self,
        mock_build: MagicMock,
        mock_init: MagicMock,
        mock_close: MagicMock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_build.return_value.notes.list_notes.return_value = [
            NoteRecord(id="n1", user_id="u1", title="Cells")
        ]

        assert main(["--user", "u1", "note", "list"]) == 0

        assert '"title": "Cells"' in capsys.readouterr().out
        mock_init.assert_called_once()
        mock_close.assert_called_once()

    @patch("studybot.main.close_pool")
    @patch("studybot.main.init_pool")
    @patch("studybot.main.build_study_bot")
    def test_domain_error_returns_one(
        self,
        mock_build: MagicMock,
        _mock_init: MagicMock,
        mock_close: MagicMock,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        mock_build.return_value.quizzes.generate_quiz.side_effect = InputValidationError(
            "Please enter a topic"
        )

        assert main(["--user", "u1", "quiz", "generate", " "]) == 1

        assert "Error: Please enter a topic" in capsys.readouterr().err
        mock_close.assert_called_once()
