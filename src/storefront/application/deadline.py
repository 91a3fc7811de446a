"""Per-request operation deadline."""

from __future__ import annotations

import time
from collections.abc import Callable

from storefront.domain.exceptions import OperationTimeoutError


class Deadline:
    """A monotonic-clock budget for one request.

    ``check()`` is called at safe points, i.e. before anything has been
    mutated, so raising there never leaves partial state behind.
    """

    def __init__(
        self,
        seconds: float | None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._seconds = seconds
        self._expires_at = None if seconds is None else clock() + seconds

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and self._clock() >= self._expires_at

    def check(self) -> None:
        if self.expired:
            raise OperationTimeoutError(
                f"Operation exceeded its {self._seconds:g}s deadline; "
                f"nothing was changed, please retry"
            )
