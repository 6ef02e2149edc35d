"""
Rate Limiter - cooldown between vision API calls

Rejects (does not queue) a request issued before the cooldown has
elapsed since the last accepted one.
"""

import time

from errors import RateLimited


class CooldownLimiter:
    def __init__(self, cooldown: float = 1.0, clock=time.monotonic):
        self.cooldown = cooldown
        self.clock = clock
        self.last_call = None

    def remaining(self) -> float:
        """Seconds until the next call is allowed (0 if allowed now)."""
        if self.last_call is None:
            return 0.0
        return max(0.0, self.cooldown - (self.clock() - self.last_call))

    def acquire(self):
        """Record a call, or raise RateLimited if still cooling down."""
        now = self.clock()
        if self.last_call is not None:
            wait = self.cooldown - (now - self.last_call)
            if wait > 0:
                raise RateLimited(wait, f"Cooldown active, {wait:.2f}s remaining")
        self.last_call = now

    def reset(self):
        self.last_call = None
