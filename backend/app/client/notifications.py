"""
Toast notifications.

Components never raise to their caller for an expected failure; they post a
Toast instead. The Notifier keeps every toast it was given (newest last) so
a UI shell can render them and tests can assert on them.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Toast:
    title: str
    description: Optional[str] = None
    variant: str = DEFAULT


class Notifier:
    """Collects toasts posted by components."""

    def __init__(self) -> None:
        self.toasts: List[Toast] = []

    def toast(self, title: str, description: Optional[str] = None, variant: str = DEFAULT) -> Toast:
        item = Toast(title=title, description=description, variant=variant)
        self.toasts.append(item)
        level = logging.WARNING if variant == DESTRUCTIVE else logging.INFO
        logger.log(level, "Toast: %s%s", title, f" ({description})" if description else "")
        return item

    @property
    def last(self) -> Optional[Toast]:
        return self.toasts[-1] if self.toasts else None

    def clear(self) -> None:
        self.toasts.clear()
