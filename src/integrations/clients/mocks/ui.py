"""
Headless navigation/notification collaborators.

Used by the demo script and tests in place of a real router and toast layer.
They record what the checkout asked for and log it.
"""

import logging
from typing import List, Optional, Tuple

from src.integrations.contracts.interfaces import Navigator, NotificationKind, Notifier

logger = logging.getLogger(__name__)


class RecordingNavigator(Navigator):
    def __init__(self) -> None:
        self.paths: List[str] = []

    def redirect(self, path: str) -> None:
        logger.info("[NAV] redirect -> %s", path)
        self.paths.append(path)

    @property
    def current_path(self) -> Optional[str]:
        return self.paths[-1] if self.paths else None


class LoggingNotifier(Notifier):
    def __init__(self) -> None:
        self.messages: List[Tuple[str, NotificationKind]] = []

    def notify(self, message: str, kind: NotificationKind) -> None:
        if kind == NotificationKind.ERROR:
            logger.warning("[NOTIFY] %s", message)
        else:
            logger.info("[NOTIFY] %s", message)
        self.messages.append((message, kind))

    @property
    def errors(self) -> List[str]:
        return [m for m, k in self.messages if k == NotificationKind.ERROR]

    @property
    def successes(self) -> List[str]:
        return [m for m, k in self.messages if k == NotificationKind.SUCCESS]
