import math
import time

CODE_LIFETIME_SECONDS = 600
RESEND_COOLDOWN_SECONDS = 120
MAX_ATTEMPTS_EXCEEDED = "MAX_ATTEMPTS_EXCEEDED"


class Countdown:
    """Whole seconds left until a deadline, read from ``clock`` on demand."""

    def __init__(self, seconds=0, clock=time.monotonic):
        self._clock = clock
        self._deadline = clock() + seconds

    def restart(self, seconds):
        self._deadline = self._clock() + seconds

    def remaining(self) -> int:
        return max(0, math.ceil(self._deadline - self._clock()))

    @property
    def expired(self) -> bool:
        return self.remaining() == 0


class ResendState:
    """Code expiry plus the resend cooldown for one verification screen.

    The cooldown length and the attempts limit come from structured fields
    on ``ApiError`` (``retry_after`` and ``code``), never from message text.
    """

    def __init__(self, clock=time.monotonic):
        self.code_timer = Countdown(CODE_LIFETIME_SECONDS, clock)
        self.cooldown = Countdown(0, clock)
        self.exhausted = False

    @property
    def can_resend(self) -> bool:
        return not self.exhausted and self.cooldown.expired

    def sent(self):
        self.code_timer.restart(CODE_LIFETIME_SECONDS)
        self.cooldown.restart(RESEND_COOLDOWN_SECONDS)

    def failed(self, error):
        if error.retry_after:
            self.cooldown.restart(error.retry_after)
        if error.code == MAX_ATTEMPTS_EXCEEDED:
            self.exhausted = True
