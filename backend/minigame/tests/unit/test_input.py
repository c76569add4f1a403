import pytest
from pydantic import ValidationError

from minigame.logic.exceptions import InvalidInputError, MinigameError
from minigame.logic.input import InputBus, KeyPress, TextSubmit, parse_answer, parse_word


class TestParseAnswer:
    @pytest.mark.parametrize(("text", "expected"), [("42", 42), (" 7 ", 7), ("0", 0), ("-3", -3)])
    def test_accepts_integers(self, text, expected):
        assert parse_answer(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "4.5", "1e3", "twelve"])
    def test_rejects_non_integers(self, text):
        with pytest.raises(InvalidInputError):
            parse_answer(text)

    def test_invalid_input_is_a_domain_error(self):
        with pytest.raises(MinigameError):
            parse_answer("")


class TestParseWord:
    def test_strips_surrounding_whitespace(self):
        assert parse_word("  hello ") == "hello"

    def test_keeps_case(self):
        assert parse_word("Hello") == "Hello"

    def test_rejects_blank(self):
        with pytest.raises(InvalidInputError, match="empty"):
            parse_word("   ")


class TestInputEvents:
    def test_key_press_is_frozen(self):
        event = KeyPress(key=" ")
        with pytest.raises(ValidationError):
            event.key = "x"

    def test_key_press_requires_a_key(self):
        with pytest.raises(ValidationError):
            KeyPress(key="")

    def test_text_submit_allows_empty_text(self):
        assert TextSubmit(text="").text == ""


class TestInputBus:
    def test_dispatch_reaches_attached_listeners(self):
        bus = InputBus()
        received = []
        bus.attach(received.append)

        assert bus.dispatch(KeyPress(key="a")) is True
        assert received == [KeyPress(key="a")]

    def test_dispatch_without_listeners_returns_false(self):
        assert InputBus().dispatch(KeyPress(key="a")) is False

    def test_attach_is_idempotent(self):
        bus = InputBus()
        received = []
        bus.attach(received.append)
        bus.attach(received.append)

        bus.dispatch(TextSubmit(text="x"))

        assert bus.listener_count == 1
        assert len(received) == 1

    def test_detach_stops_delivery(self):
        bus = InputBus()
        received = []
        bus.attach(received.append)
        bus.detach(received.append)

        bus.dispatch(KeyPress(key="a"))

        assert received == []
        assert bus.listener_count == 0

    def test_detach_unknown_listener_is_noop(self):
        bus = InputBus()
        bus.detach(print)
        assert bus.listener_count == 0

    def test_listener_may_detach_itself_during_dispatch(self):
        bus = InputBus()
        received = []

        def once(event):
            received.append(event)
            bus.detach(once)

        bus.attach(once)
        bus.dispatch(KeyPress(key="a"))
        bus.dispatch(KeyPress(key="b"))

        assert received == [KeyPress(key="a")]
