"""
Configuration package for the Translation Review Bot.
"""

from .settings import Settings, SettingsProtocol
from .prompts import SYSTEM_PROMPT, INTRO_MESSAGE, build_messages, build_user_prompt

__all__ = [
    "Settings",
    "SettingsProtocol",
    "SYSTEM_PROMPT",
    "INTRO_MESSAGE",
    "build_messages",
    "build_user_prompt"
]
