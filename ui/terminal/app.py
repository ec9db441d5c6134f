"""
Textual Application - Terminal chat with the assistant
======================================================

This module implements a Textual chat window around a ChatSession.
The input is disabled while the assistant is "typing", so only one
message is in flight at a time.
"""

from typing import Optional

from rich.markup import escape
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Header, Footer, Static, Input

from core.config import Config, load_config
from core.exceptions import ChatError
from core.logging import get_logger
from assistant.engine import IntentMatcher
from assistant.faq import rule_table_from_config
from assistant.session import ChatSession, ChatTurn, USER

logger = get_logger("tui.app")


class TurnView(Static):
    """A single transcript entry."""

    def __init__(self, turn: ChatTurn, show_timestamp: bool = True, **kwargs):
        label = "You" if turn.speaker == USER else "Assistant"
        text = f"[b]{label}[/b]\n{escape(turn.text)}"
        if show_timestamp:
            text += f"\n[dim]{turn.timestamp.strftime('%H:%M')}[/dim]"
        super().__init__(text, markup=True, classes=f"turn {turn.speaker}", **kwargs)
        self.turn = turn


class ChatApp(App):
    """
    Student Job Assistant terminal chat.
    """

    TITLE = "Student Job Assistant"

    CSS = """
    #transcript {
        height: 1fr;
        padding: 0 1;
    }

    .turn {
        margin: 1 0 0 0;
        padding: 0 1;
        width: 100%;
    }

    .user {
        background: $primary 20%;
        text-align: right;
    }

    .assistant {
        background: $panel;
    }

    #typing {
        color: $text-muted;
        padding: 0 1;
        display: none;
    }

    #typing.visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit"),
    ]

    def __init__(self, config: Optional[Config] = None, session: Optional[ChatSession] = None):
        super().__init__()

        self.config = config or load_config()

        if session is None:
            matcher = IntentMatcher(
                table=rule_table_from_config(self.config),
                max_input_length=self.config.assistant.max_input_length,
            )
            session = ChatSession(
                matcher,
                typing_delay=(
                    self.config.assistant.typing_delay_min,
                    self.config.assistant.typing_delay_max,
                ),
                greeting=self.config.assistant.greeting or None,
            )

        self.session = session

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="transcript"):
            for turn in self.session.turns:
                yield TurnView(turn, self.config.ui.show_timestamps)
        yield Static("Assistant is typing...", id="typing")
        yield Input(
            placeholder="Ask me about jobs, applications, interviews, or anything else...",
            id="message"
        )
        yield Footer()

    def on_mount(self) -> None:
        self.theme = "textual-light" if self.config.ui.tui_theme == "light" else "textual-dark"
        self.query_one("#message", Input).focus()

    def _append(self, turn: ChatTurn) -> None:
        transcript = self.query_one("#transcript", VerticalScroll)
        transcript.mount(TurnView(turn, self.config.ui.show_timestamps))
        transcript.scroll_end(animate=False)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        text = event.value
        if not text.strip() or self.session.is_pending:
            return

        event.input.value = ""
        self.send(text)

    @work(exclusive=True)
    async def send(self, text: str) -> None:
        message_input = self.query_one("#message", Input)
        typing = self.query_one("#typing", Static)

        message_input.disabled = True
        typing.add_class("visible")

        try:
            reply = await self.session.submit(text)
            self._append(self.session.turns[-2])
            self._append(reply)
        except ChatError as e:
            self.notify(e.message, severity="warning")
        finally:
            typing.remove_class("visible")
            message_input.disabled = False
            message_input.focus()


def run_tui(config: Optional[Config] = None) -> None:
    app = ChatApp(config=config)
    app.run()
