# tests/sessions/test_session.py
"""
Tests for gptsession.sessions.session.Session.

Covers history ordering, the auto-sync lifecycle (new file vs. resumed
file), loading, cloning and error propagation.
"""

import json
import os
from unittest.mock import MagicMock

import pytest

from gptsession.exceptions import ParseError, SessionFileNotFoundError, SessionSyncError
from gptsession.models import Message
from gptsession.sessions import Session


def _write_history(path, records):
    path.write_text("".join(json.dumps(r) + "\n" for r in records), encoding="utf-8")


def _read_lines(path):
    return path.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def history_path(tmp_path):
    return tmp_path / "chat.history"


class TestSessionHistory:
    def test_new_session_is_empty(self):
        session = Session()
        assert session.dump() == []
        assert len(session) == 0
        assert not session.auto_sync_enabled

    def test_append_message_stores_record(self):
        session = Session()
        record = session.append(Message().set_text("hi"))
        assert record == {"role": "user", "content": "hi"}
        assert session.dump() == [{"role": "user", "content": "hi"}]

    def test_history_holds_records_not_messages(self):
        session = Session()
        message = Message().set_text("first")
        session.append(message)
        message.set_text("changed later")
        assert session.dump()[0]["content"] == "first"
        assert all(isinstance(r, dict) for r in session.dump())

    def test_append_builder_callable(self):
        session = Session()
        session.append(lambda s: s.new_message("system").set_text("You are terse."))
        assert session.dump() == [{"role": "system", "content": "You are terse."}]

    def test_builder_receives_session(self):
        session = Session()
        seen = []

        def build(s):
            seen.append(s)
            return s.new_message().set_text("x")

        session.append(build)
        assert seen == [session]

    def test_append_plain_record(self):
        session = Session()
        session.append({"role": "assistant", "content": "ok"})
        assert session.dump() == [{"role": "assistant", "content": "ok"}]

    def test_append_rejects_other_types(self):
        with pytest.raises(TypeError):
            Session().append(42)
        with pytest.raises(TypeError):
            Session().append(lambda s: None)

    def test_append_order_is_chronological(self):
        session = Session()
        for i in range(5):
            session.append(Message().set_text(str(i)))
        assert [r["content"] for r in session.dump()] == ["0", "1", "2", "3", "4"]
        assert [r["content"] for r in session] == ["0", "1", "2", "3", "4"]

    def test_dump_is_a_copy(self):
        session = Session()
        session.append(Message().set_text("a"))
        dumped = session.dump()
        dumped.append({"role": "user", "content": "injected"})
        assert len(session.dump()) == 1

    def test_seed_history_is_copied(self):
        seed = [{"role": "system", "content": "s"}]
        session = Session(seed)
        session.append(Message().set_text("u"))
        assert len(seed) == 1


class TestNewMessage:
    def test_new_message_is_not_appended(self):
        session = Session()
        message = session.new_message("assistant")
        assert message.role == "assistant"
        assert session.dump() == []

    def test_new_message_runs_builder(self):
        message = Session().new_message("user", lambda m: m.set_text("built"))
        assert message.text == "built"


class TestClone:
    def test_clone_shares_no_history(self):
        session = Session()
        session.append(Message().set_text("a"))
        clone = session.clone()
        clone.append(Message().set_text("b"))
        assert len(session) == 1
        assert len(clone) == 2

    def test_clone_does_not_sync(self, history_path):
        session = Session()
        session.enable_auto_sync(history_path)
        clone = session.clone()
        assert not clone.auto_sync_enabled
        clone.append(Message().set_text("only in memory"))
        assert not history_path.exists()


class TestAutoSync:
    def test_new_file_gets_one_line_per_append(self, history_path):
        session = Session()
        session.enable_auto_sync(history_path)
        messages = [Message(role=r).set_text(t) for r, t in
                    [("system", "be brief"), ("user", "hi"), ("assistant", "hello")]]
        for m in messages:
            session.append(m)

        lines = _read_lines(history_path)
        assert len(lines) == 3
        assert [json.loads(line) for line in lines] == [m.to_dict() for m in messages]

    def test_initializer_called_for_new_file(self, history_path):
        session = Session()
        initializer = MagicMock(side_effect=lambda: session.append(
            session.new_message("system").set_text("seed")))

        session.enable_auto_sync(history_path, initializer)

        initializer.assert_called_once_with()
        assert session.dump() == [{"role": "system", "content": "seed"}]
        assert [json.loads(line) for line in _read_lines(history_path)] == [{"role": "system", "content": "seed"}]

    def test_nothing_written_before_first_append(self, history_path):
        session = Session()
        session.append(Message().set_text("before arming"))
        session.enable_auto_sync(history_path)
        assert not history_path.exists()
        session.append(Message().set_text("after arming"))
        assert [json.loads(line)["content"] for line in _read_lines(history_path)] == ["after arming"]

    def test_existing_file_replaces_history(self, history_path):
        stored = [{"role": "system", "content": "s"}, {"role": "user", "content": "u"}]
        _write_history(history_path, stored)

        session = Session()
        session.append(Message().set_text("discarded"))
        initializer = MagicMock()

        session.enable_auto_sync(history_path, initializer)

        assert session.dump() == stored
        initializer.assert_not_called()

    def test_resumed_session_appends_to_existing_file(self, history_path):
        _write_history(history_path, [{"role": "user", "content": "old"}])
        session = Session()
        session.enable_auto_sync(history_path)
        session.append(Message(role="assistant").set_text("new"))

        assert [json.loads(line)["content"] for line in _read_lines(history_path)] == ["old", "new"]
        assert len(session) == 2

    def test_disable_auto_sync(self, history_path):
        session = Session()
        session.enable_auto_sync(history_path)
        session.append(Message().set_text("synced"))
        session.disable_auto_sync()
        session.append(Message().set_text("not synced"))
        assert len(_read_lines(history_path)) == 1
        assert len(session) == 2

    def test_malformed_existing_file_raises(self, history_path):
        original = '{"role": "user"}\nnot json\n'
        history_path.write_text(original, encoding="utf-8")
        session = Session()
        session.append(Message().set_text("kept in memory"))

        with pytest.raises(ParseError):
            session.enable_auto_sync(history_path)

        assert not session.auto_sync_enabled
        assert session.dump() == [{"role": "user", "content": "kept in memory"}]
        session.append(Message().set_text("next"))
        assert history_path.read_text(encoding="utf-8") == original

    def test_unicode_round_trip(self, history_path):
        session = Session()
        session.enable_auto_sync(history_path)
        session.append(Message().set_text("grüße 👋"))
        assert Session.load(history_path).dump() == [{"role": "user", "content": "grüße 👋"}]

    @pytest.mark.skipif(os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
                        reason="permission bits are not enforced")
    def test_write_failure_propagates(self, tmp_path):
        read_only_dir = tmp_path / "ro"
        read_only_dir.mkdir()
        read_only_dir.chmod(0o500)
        try:
            session = Session()
            session.enable_auto_sync(read_only_dir / "chat.history")
            with pytest.raises(SessionSyncError):
                session.append(Message().set_text("cannot be written"))
        finally:
            read_only_dir.chmod(0o700)

    def test_write_failure_to_directory_propagates(self, tmp_path):
        target = tmp_path / "not_a_file"
        session = Session()
        session.enable_auto_sync(target)
        target.mkdir()
        with pytest.raises(SessionSyncError):
            session.append(Message().set_text("x"))


class TestLoad:
    def test_round_trip(self, history_path):
        session = Session()
        session.enable_auto_sync(history_path)
        for role, text in [("system", "s"), ("user", "u"), ("assistant", "a")]:
            session.append(Message(role=role).set_text(text))
        session.append(Message().set_text("look").set_image_data("data:image/png;base64,AA=="))

        loaded = Session.load(history_path)
        assert loaded.dump() == session.dump()

    def test_load_does_not_arm_auto_sync(self, history_path):
        _write_history(history_path, [{"role": "user", "content": "u"}])
        loaded = Session.load(history_path)
        assert not loaded.auto_sync_enabled
        loaded.append(Message().set_text("memory only"))
        assert len(_read_lines(history_path)) == 1

    def test_load_tolerates_blank_trailing_line(self, history_path):
        history_path.write_text('{"role": "user", "content": "u"}\n\n', encoding="utf-8")
        assert Session.load(history_path).dump() == [{"role": "user", "content": "u"}]

    def test_load_none_is_empty(self):
        assert Session.load(None).dump() == []

    def test_load_malformed_line(self, history_path):
        history_path.write_text('{"role": "user", "content": "u"}\n{broken\n', encoding="utf-8")
        with pytest.raises(ParseError) as exc_info:
            Session.load(history_path)
        assert exc_info.value.line_number == 2

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(SessionFileNotFoundError):
            Session.load(tmp_path / "missing.history")
