from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from tableside.application.dto.responses import AnnouncementResponse
from tableside.application.mappers.converters import (
    convert_date_to_intl_string,
    convert_number_to_order_number,
)

logger = logging.getLogger(__name__)

NOT_FOUND_URL = "/404"
SERVER_ERROR_URL = "/500"
TABLE_NOT_FOUND_MESSAGE = "Not found restaurant table. Please contact the staff"


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"
    PRESERVE = "preserve"


class DisplayDuration(str, Enum):
    NORMAL = "normal"
    BIG = "big"


class Notifier(Protocol):
    def notify(
        self,
        severity: Severity,
        message: str,
        duration: DisplayDuration = DisplayDuration.NORMAL,
    ) -> None: ...


class Navigator(Protocol):
    async def navigate(self, destination: str) -> None: ...


class LoggingNotifier(Notifier):
    def notify(
        self,
        severity: Severity,
        message: str,
        duration: DisplayDuration = DisplayDuration.NORMAL,
    ) -> None:
        level = logging.ERROR if severity == Severity.ERROR else logging.INFO
        logger.log(level, message, extra={"state": severity.value})


class LoggingNavigator(Navigator):
    def __init__(self) -> None:
        self.current: str | None = None

    async def navigate(self, destination: str) -> None:
        self.current = destination
        logger.info("navigated", extra={"path": destination})


def format_rejection_notice(announcement: AnnouncementResponse) -> str:
    items = announcement.orderItems
    subject = items[0] if items else "The requested items"
    if len(items) > 1:
        subject = f"{subject} and {len(items) - 1} other item(s)"
    return (
        f"Request number: {convert_number_to_order_number(announcement.orderRequestNumber)}\n"
        f"Ordered at: {convert_date_to_intl_string(announcement.createdAt)}\n"
        f"{subject} could not be served for the following reason.\n"
        "We are sorry, please order something else.\n"
        f"Reason: \"{announcement.rejectedReason}\""
    )
