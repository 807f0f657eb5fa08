"""Unit tests for ChatSession turn state and PanelState."""

import pytest
import pytest_check as check

from src.ui.session import (
    ERROR_REPLY,
    ChatSession,
    PanelState,
    TurnInProgressError,
    TurnState,
)


class TestBeginTurn:
    def test_appends_user_message_optimistically(self) -> None:
        session = ChatSession()

        history = session.begin_turn("  Hello \n")

        check.equal([(m.role, m.content) for m in history], [("user", "Hello")])
        check.equal(session.messages, history)
        check.equal(session.state, TurnState.SENDING)
        check.is_none(session.pending)

    def test_history_includes_prior_messages(self) -> None:
        session = ChatSession()
        session.begin_turn("First")
        session.append_fragment("Reply")
        session.finish_turn()

        history = session.begin_turn("Second")

        assert [m.content for m in history] == ["First", "Reply", "Second"]

    def test_rejects_overlapping_turns(self) -> None:
        session = ChatSession()
        session.begin_turn("Hello")

        with pytest.raises(TurnInProgressError):
            session.begin_turn("Again")

        assert len(session.messages) == 1

    def test_rejects_blank_input(self) -> None:
        session = ChatSession()

        with pytest.raises(ValueError):
            session.begin_turn("   ")

        assert session.state is TurnState.IDLE
        assert session.messages == []

    def test_ids_are_unique_and_time_derived(self) -> None:
        session = ChatSession()
        session.begin_turn("a")
        session.append_fragment("b")
        session.finish_turn()
        session.begin_turn("c")

        ids = [m.id for m in session.messages]
        check.equal(len(set(ids)), len(ids))
        check.is_true(all(i.isdigit() for i in ids))
        check.equal(ids, sorted(ids, key=int))


class TestStreaming:
    def test_pending_accumulates_fragments(self) -> None:
        session = ChatSession()
        session.begin_turn("Hello")

        snapshots = [session.append_fragment(t).content for t in ("Hi", " there", "!")]

        check.equal(snapshots, ["Hi", "Hi there", "Hi there!"])
        check.equal(session.state, TurnState.STREAMING)
        check.equal(session.visible_messages[-1].content, "Hi there!")
        check.equal(len(session.messages), 1)

    def test_pending_keeps_its_id(self) -> None:
        session = ChatSession()
        session.begin_turn("Hello")

        first = session.append_fragment("a")
        second = session.append_fragment("b")

        assert first.id == second.id

    def test_fragment_outside_turn_is_rejected(self) -> None:
        with pytest.raises(RuntimeError):
            ChatSession().append_fragment("stray")


class TestFinishTurn:
    def test_commits_non_empty_reply(self) -> None:
        session = ChatSession()
        session.begin_turn("Hello")
        for text in ("Hi", " there", "!"):
            session.append_fragment(text)

        committed = session.finish_turn()

        check.equal(committed.content, "Hi there!")
        check.equal(
            [(m.role, m.content) for m in session.messages],
            [("user", "Hello"), ("assistant", "Hi there!")],
        )
        check.is_none(session.pending)
        check.equal(session.state, TurnState.IDLE)
        check.equal(session.last_outcome, TurnState.COMMITTED)

    def test_discards_whitespace_reply(self) -> None:
        session = ChatSession()
        session.begin_turn("Hello")
        session.append_fragment("  \n ")

        assert session.finish_turn() is None
        assert len(session.messages) == 1
        assert session.last_outcome is TurnState.DISCARDED
        assert session.state is TurnState.IDLE

    def test_discards_when_no_fragment_arrived(self) -> None:
        session = ChatSession()
        session.begin_turn("Hello")

        assert session.finish_turn() is None
        assert session.last_outcome is TurnState.DISCARDED


class TestFailTurn:
    def test_appends_error_reply_and_returns_to_idle(self) -> None:
        session = ChatSession()
        session.begin_turn("Hello")
        session.append_fragment("partial")

        reply = session.fail_turn()

        check.equal(reply.role, "assistant")
        check.equal(reply.content, ERROR_REPLY)
        check.equal([m.content for m in session.messages], ["Hello", ERROR_REPLY])
        check.is_none(session.pending)
        check.equal(session.state, TurnState.IDLE)
        check.equal(session.last_outcome, TurnState.FAILED)

    def test_new_turn_allowed_after_failure(self) -> None:
        session = ChatSession()
        session.begin_turn("Hello")
        session.fail_turn()

        history = session.begin_turn("Retry")

        assert history[-1].content == "Retry"


class TestReset:
    def test_clears_history(self) -> None:
        session = ChatSession()
        session.begin_turn("Hello")
        session.finish_turn()

        session.reset()

        assert session.messages == []

    def test_refuses_mid_turn(self) -> None:
        session = ChatSession()
        session.begin_turn("Hello")

        with pytest.raises(TurnInProgressError):
            session.reset()


class TestPanelState:
    def test_starts_closed_and_toggles(self) -> None:
        panel = PanelState()

        check.is_false(panel.is_open)
        panel.toggle()
        check.is_true(panel.is_open)
        panel.toggle()
        check.is_false(panel.is_open)

    def test_panels_are_independent(self) -> None:
        first, second = PanelState(), PanelState()

        first.toggle()

        assert first.is_open
        assert not second.is_open
