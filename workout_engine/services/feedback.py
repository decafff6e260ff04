"""Fire-and-forget user feedback (haptics, sounds). Failures never reach the caller."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class HapticKind(str, Enum):
    SUCCESS = "success"
    PERSONAL_RECORD = "personal_record"


class FeedbackHooks(Protocol):
    def haptic(self, kind: HapticKind) -> None: ...

    def play_sound(self, name: str) -> None: ...


class LoggingFeedback:
    """Default hooks for headless use: just log."""

    def haptic(self, kind: HapticKind) -> None:
        logger.debug("haptic: %s", kind.value)

    def play_sound(self, name: str) -> None:
        logger.debug("sound: %s", name)


REST_COMPLETE_SOUND = "rest_complete"


def notify_rest_complete(feedback: FeedbackHooks) -> None:
    _safely(feedback.haptic, HapticKind.SUCCESS)
    _safely(feedback.play_sound, REST_COMPLETE_SOUND)


def notify_personal_record(feedback: FeedbackHooks) -> None:
    _safely(feedback.haptic, HapticKind.PERSONAL_RECORD)


def _safely(hook, *args) -> None:
    try:
        hook(*args)
    except Exception:
        logger.warning("Feedback hook %s failed", getattr(hook, "__name__", hook), exc_info=True)
