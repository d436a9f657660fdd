"""Wrong-password retry ceiling."""

import logging

from .state import RetryState

logger = logging.getLogger(__name__)


class PasswordRetryGuard:
    """
    Tracks consecutive wrong-password failures.

    Reaching the ceiling does not block further attempts: the counter and
    the feedback flag are reset in the same step so the confirmation form
    starts over.
    """

    def __init__(self, state: RetryState, ceiling: int = 3):
        if ceiling < 1:
            raise ValueError("Retry ceiling must be at least 1")
        self._state = state
        self.ceiling = ceiling

    @property
    def count(self) -> int:
        return self._state.count

    @property
    def wrong_password(self) -> bool:
        return self._state.wrong_password

    def record_wrong_password(self) -> bool:
        """Register a wrong password. Returns True when the ceiling was hit."""
        self._state.wrong_password = True
        self._state.count += 1

        if self._state.count >= self.ceiling:
            logger.info(
                f"Wrong password limit reached ({self.ceiling}), resetting confirmation form"
            )
            self.reset()
            return True

        logger.debug(f"Wrong password attempt {self._state.count}/{self.ceiling}")
        return False

    def clear_flag(self) -> None:
        self._state.wrong_password = False

    def reset(self) -> None:
        self._state.count = 0
        self._state.wrong_password = False
