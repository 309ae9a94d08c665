"""Terminal runtime driving :class:`ChatModel` with rich.

Commands returned by the model run on a small thread pool; their resulting
messages are queued in an inbox and applied on the UI thread. While a stream
is draining the in-progress reply is shown in a transient ``rich.live.Live``
region; finished lines are printed permanently.
"""

from __future__ import annotations

import queue
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.live import Live

from llmagent.base.interfaces import SupportsStreaming
from llmagent.base.logging import get_logger, log_event

from .chat_model import ChatModel, Command, ErrorMsg, Msg, QuitMsg, SubmitMsg

_QUIT_WORDS = {"/quit", "/exit"}
_REFRESH_PER_SEC = 8

_logger = get_logger("service.chat")


class ChatProgram:
    """Reads lines from the user and renders the model's transcript."""

    def __init__(
        self,
        model: ChatModel,
        *,
        console: Optional[Console] = None,
        read_line: Optional[Callable[[str], str]] = None,
        max_workers: int = 2,
    ) -> None:
        self.model = model
        self.console = console or Console()
        self._read_line = read_line or self.console.input
        self._inbox: "queue.Queue[Msg]" = queue.Queue()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="llmagent-chat")
        self._printed = 0

    # ---- command plumbing ----
    def _dispatch(self, commands: Iterable[Command]) -> None:
        for command in commands:
            self._executor.submit(command).add_done_callback(self._deliver)

    def _deliver(self, future: "Future[Optional[Msg]]") -> None:
        try:
            msg = future.result()
        except Exception as exc:  # surfaced in the transcript
            msg = ErrorMsg(exc)
        if msg is not None:
            self._inbox.put(msg)

    def send(self, msg: Msg) -> None:
        """Apply ``msg`` on the calling thread and schedule its commands."""
        self._dispatch(self.model.update(msg))

    # ---- rendering ----
    def _flush(self, keep_last: bool = False) -> None:
        """Print transcript lines not yet printed (optionally holding back the last)."""
        end = len(self.model.lines) - (1 if keep_last else 0)
        if end > self._printed:
            self.console.print(self.model.view(self._printed, end))
            self._printed = end

    def _wait_for_stream(self) -> None:
        """Apply inbox messages until the current stream finishes."""
        self._flush(keep_last=True)
        with Live(
            self.model.view(self._printed),
            console=self.console,
            transient=True,
            refresh_per_second=_REFRESH_PER_SEC,
        ) as live:
            while self.model.streaming:
                self.send(self._inbox.get())
                live.update(self.model.view(self._printed))
        self._flush()

    # ---- main loop ----
    def run(self) -> int:
        """Run until the user quits; return a process exit code."""
        log_event(_logger, "chat.start", provider=getattr(self.model.provider, "provider_name", None))
        self._flush()
        try:
            while not self.model.quitting:
                try:
                    text = self._read_line("> ")
                except EOFError:
                    self.send(QuitMsg())
                    break
                if text.strip().lower() in _QUIT_WORDS:
                    self.send(QuitMsg())
                    break
                self.send(SubmitMsg(text))
                if self.model.streaming:
                    self._wait_for_stream()
        except KeyboardInterrupt:
            self.send(QuitMsg())
        finally:
            self._executor.shutdown(wait=False, cancel_futures=True)
        self.console.print("Chat finished.")
        log_event(_logger, "chat.end")
        return 0


def run_chat(provider: SupportsStreaming, *, console: Optional[Console] = None) -> int:
    """Start an interactive chat session against ``provider``."""
    return ChatProgram(ChatModel(provider), console=console).run()


__all__ = ["ChatProgram", "run_chat"]
