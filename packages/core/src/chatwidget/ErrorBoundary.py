"""Render supervisor that contains crashes in the UI layer."""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ErrorBoundary:
    """Wrap a render callback and swap in a static recovery view on failure.

    Once the wrapped render raises, it is no longer called until
    :meth:`reset` (the "reload" action). Failures of the fallback view are
    logged and dropped, so calling the boundary never raises.
    """

    def __init__(
        self,
        render: Callable[..., None],
        fallback: Callable[[], None],
    ) -> None:
        self._render = render
        self._fallback = fallback
        self.has_error = False

    def __call__(self, *args, **kwargs) -> None:
        if self.has_error:
            return
        try:
            self._render(*args, **kwargs)
        except Exception:
            logger.exception("Render failed, showing recovery view")
            self.has_error = True
            self._show_fallback()

    def reset(self) -> None:
        self.has_error = False

    def _show_fallback(self) -> None:
        try:
            self._fallback()
        except Exception:
            logger.exception("Recovery view failed")
