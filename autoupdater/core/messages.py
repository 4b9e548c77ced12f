"""User-facing message catalog — English defaults, optional JSON override."""

import json
import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)


class MessageKey(Enum):
    CHECKING = "CHECKING"
    UPDATING = "UPDATING"
    DOWNLOADING = "DOWNLOADING"
    VERIFYING = "VERIFYING"
    INSTALLING = "INSTALLING"
    RESTARTING = "RESTARTING"
    FAILED = "FAILED"
    REBOOT = "REBOOT"
    CONTINUE = "CONTINUE"


DEFAULT_MESSAGES = {
    MessageKey.CHECKING: "Checking for mod updates...",
    MessageKey.UPDATING: "Auto-updating",
    MessageKey.DOWNLOADING: "Downloading",
    MessageKey.VERIFYING: "Verifying",
    MessageKey.INSTALLING: "Installing",
    MessageKey.RESTARTING: "Restarting...",
    MessageKey.FAILED: "Some mods failed to update.",
    MessageKey.REBOOT: "Press Confirm to restart.",
    MessageKey.CONTINUE: "Press Confirm to continue.",
}


class Messages:
    """Looks up message text by key."""

    def __init__(self, overrides: dict[str, str] | None = None):
        self._texts = {key: text for key, text in DEFAULT_MESSAGES.items()}
        for name, text in (overrides or {}).items():
            try:
                self._texts[MessageKey(name)] = str(text)
            except ValueError:
                logger.warning("Ignoring unknown message key: %s", name)

    def localize(self, key: MessageKey) -> str:
        return self._texts.get(key, key.value)

    __call__ = localize

    @staticmethod
    def load(path: str | None) -> 'Messages':
        """Load overrides from a JSON object file. Returns defaults on any problem."""
        if not path or not os.path.isfile(path):
            return Messages()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load messages from %s: %s", path, e)
            return Messages()

        if not isinstance(data, dict):
            logger.warning("Messages file %s is not a JSON object", path)
            return Messages()

        logger.info("Loaded messages from %s", path)
        return Messages(data)
