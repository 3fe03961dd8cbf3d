from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from steamguard.web.wire import FinalizePayload

STATUS_BAD_SMS_CODE = 89
STATUS_UNABLE_TO_GENERATE_CODES = 88


class FinalizeAction(str, Enum):
    SUCCEED = "SUCCEED"
    RETRY = "RETRY"
    BAD_SMS_CODE = "BAD_SMS_CODE"
    GIVE_UP = "GIVE_UP"  # out of attempts while Steam still rejects our codes
    FAIL = "FAIL"


def _default_status_table() -> Dict[int, FinalizeAction]:
    return {
        STATUS_BAD_SMS_CODE: FinalizeAction.BAD_SMS_CODE,
        STATUS_UNABLE_TO_GENERATE_CODES: FinalizeAction.RETRY,
    }


@dataclass(frozen=True)
class FinalizeRetryPolicy:
    """
    Decides what the finalize loop does with each response.

    Attempts are numbered from 0; with the default ceiling the loop generates
    at most 31 codes (attempts 0 through 30).
    """

    max_attempts: int = 31

    # statuses that decide the outcome before success/want_more are looked at
    status_table: Dict[int, FinalizeAction] = field(default_factory=_default_status_table)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    def attempts(self) -> range:
        return range(self.max_attempts)

    def is_last(self, attempt: int) -> bool:
        return attempt >= self.max_attempts - 1

    def decide(self, payload: Optional[FinalizePayload], attempt: int) -> FinalizeAction:
        if payload is None:
            return FinalizeAction.FAIL

        action = self.status_table.get(int(payload.status))
        if action is FinalizeAction.RETRY:
            return FinalizeAction.GIVE_UP if self.is_last(attempt) else FinalizeAction.RETRY
        if action is not None:
            return action

        if not payload.success:
            return FinalizeAction.FAIL
        if payload.want_more:
            # the loop ends by itself once attempts run out
            return FinalizeAction.RETRY
        return FinalizeAction.SUCCEED
