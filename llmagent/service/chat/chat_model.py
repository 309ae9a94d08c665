"""State and update logic for the interactive chat consumer.

The model follows a message/update/command loop: :meth:`ChatModel.update`
applies one message and returns zero or more commands. A command is a
zero-argument callable run off the UI thread whose return value (a message or
``None``) is fed back into ``update``.

Streaming contract:
- a submit while a stream is draining is ignored;
- after every non-terminal Fragment exactly one new listen command is issued;
- an error Fragment replaces the in-progress placeholder with the error while
  any partial content stays on its own line, and the channel is abandoned;
- closure with nothing received renders ``[No response or stream ended abruptly]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from rich.console import Group
from rich.text import Text

from llmagent.base.errors import ProviderError
from llmagent.base.interfaces import SupportsStreaming
from llmagent.base.logging import LogContext, get_logger, log_event
from llmagent.base.streaming import Fragment, RelayChannel

WELCOME = "Welcome to LLMAgent Chat! Type your message and press Enter."
USER_PREFIX = "You: "
BOT_PREFIX = "LLM: "
NO_RESPONSE = "[No response or stream ended abruptly]"

_STYLES = {
    "user": "magenta",
    "bot": "cyan",
    "error": "red",
    "system": "dim",
}

_logger = get_logger("service.chat")


@dataclass
class ChatLine:
    """One rendered transcript line."""

    role: str
    text: str = ""

    def render(self) -> Text:
        line = Text()
        if self.role == "user":
            line.append(USER_PREFIX, style=_STYLES["user"])
        elif self.role in ("bot", "error"):
            line.append(BOT_PREFIX, style=_STYLES["bot"])
        body_style = _STYLES["error"] if self.role == "error" else (_STYLES["system"] if self.role == "system" else None)
        line.append(self.text, style=body_style)
        return line

    @property
    def plain(self) -> str:
        return self.render().plain


@dataclass(frozen=True)
class SubmitMsg:
    text: str


@dataclass(frozen=True)
class StreamStartedMsg:
    channel: RelayChannel


@dataclass(frozen=True)
class FragmentMsg:
    fragment: Fragment


@dataclass(frozen=True)
class StreamDoneMsg:
    """The channel closed."""


@dataclass(frozen=True)
class ErrorMsg:
    """A stream could not be started."""

    error: Exception


@dataclass(frozen=True)
class QuitMsg:
    pass


Msg = Union[SubmitMsg, StreamStartedMsg, FragmentMsg, StreamDoneMsg, ErrorMsg, QuitMsg]
Command = Callable[[], Optional[Msg]]


def listen_for_fragment(channel: RelayChannel) -> Command:
    """Return a command that blocks for the next Fragment or closure."""

    def _listen() -> Msg:
        fragment = channel.receive()
        if fragment is None:
            return StreamDoneMsg()
        return FragmentMsg(fragment)

    return _listen


def start_stream(provider: SupportsStreaming, prompt: str) -> Command:
    """Return a command that opens a stream for ``prompt``."""

    def _start() -> Msg:
        try:
            return StreamStartedMsg(provider.stream(prompt))
        except ProviderError as err:
            return ErrorMsg(err)

    return _start


def _error_text(error: Exception) -> str:
    message = error.message if isinstance(error, ProviderError) else str(error)
    return f"Error: {message}"


class ChatModel:
    """Transcript plus the state of the in-flight stream."""

    def __init__(self, provider: SupportsStreaming) -> None:
        self.provider = provider
        self.lines: List[ChatLine] = [ChatLine("system", WELCOME)]
        self.streaming = False
        self.quitting = False
        self.current = ""
        self.channel: Optional[RelayChannel] = None
        self._ctx = LogContext(provider=getattr(provider, "provider_name", None))

    def update(self, msg: Msg) -> List[Command]:
        """Apply ``msg`` and return the commands to run next."""
        if isinstance(msg, SubmitMsg):
            return self._on_submit(msg.text)
        if isinstance(msg, StreamStartedMsg):
            return self._on_started(msg.channel)
        if isinstance(msg, FragmentMsg):
            return self._on_fragment(msg.fragment)
        if isinstance(msg, StreamDoneMsg):
            return self._on_done()
        if isinstance(msg, ErrorMsg):
            return self._on_error(msg.error)
        if isinstance(msg, QuitMsg):
            return self._on_quit()
        raise TypeError(f"unsupported message {msg!r}")

    # ---- handlers ----
    def _on_submit(self, text: str) -> List[Command]:
        prompt = text.strip()
        if not prompt or self.streaming:
            return []
        self.lines.append(ChatLine("user", prompt))
        self.lines.append(ChatLine("bot", ""))
        self.current = ""
        self.streaming = True
        self.channel = None
        return [start_stream(self.provider, prompt)]

    def _on_started(self, channel: RelayChannel) -> List[Command]:
        if not self.streaming:
            channel.abandon("chat no longer listening")
            return []
        self.channel = channel
        return [listen_for_fragment(channel)]

    def _on_fragment(self, fragment: Fragment) -> List[Command]:
        if fragment.error is not None:
            self._show_error(fragment.error)
            if self.channel is not None:
                self.channel.abandon("chat stopped after stream error")
            log_event(_logger, "chat.stream_error", self._ctx, error_code=fragment.error.code.value)
            return []
        self.current += fragment.content
        self.lines[-1].text = self.current
        if fragment.is_terminal:
            self.streaming = False
            return []
        if self.channel is None:
            return []
        return [listen_for_fragment(self.channel)]

    def _on_done(self) -> List[Command]:
        was_streaming = self.streaming
        self.streaming = False
        last = self.lines[-1]
        if was_streaming and not self.current and last.role == "bot" and not last.text:
            last.text = NO_RESPONSE
        return []

    def _on_error(self, error: Exception) -> List[Command]:
        self._show_error(error)
        return []

    def _on_quit(self) -> List[Command]:
        self.quitting = True
        if self.streaming and self.channel is not None:
            self.channel.abandon("chat closed")
        self.streaming = False
        return []

    def _show_error(self, error: Exception) -> None:
        last = self.lines[-1]
        if last.role == "bot" and self.current:
            # keep partial content above the error line
            self.lines.append(ChatLine("error", _error_text(error)))
        elif last.role == "bot":
            self.lines[-1] = ChatLine("error", _error_text(error))
        else:
            self.lines.append(ChatLine("error", _error_text(error)))
        self.streaming = False

    # ---- rendering ----
    def view(self, start: int = 0, end: Optional[int] = None) -> Group:
        """Render transcript lines ``start`` up to ``end`` (default: all)."""
        return Group(*(line.render() for line in self.lines[start:end]))

    def transcript(self) -> List[str]:
        """Plain-text transcript, mainly for tests."""
        return [line.plain for line in self.lines]


__all__ = [
    "WELCOME",
    "USER_PREFIX",
    "BOT_PREFIX",
    "NO_RESPONSE",
    "ChatLine",
    "ChatModel",
    "SubmitMsg",
    "StreamStartedMsg",
    "FragmentMsg",
    "StreamDoneMsg",
    "ErrorMsg",
    "QuitMsg",
    "Command",
    "listen_for_fragment",
    "start_stream",
]
