"""Interactive chat consumer (model/update/command loop rendered with rich)."""

from .chat_model import ChatModel, listen_for_fragment
from .chat_program import ChatProgram, run_chat

__all__ = ["ChatModel", "ChatProgram", "listen_for_fragment", "run_chat"]
