# nightlight_toggle_core/suppression.py
"""
Hides the shell's own Night Light status icon while ours is shown.

The shell's built-in indicator refreshes itself through a `_sync` routine.
While suppressed, that routine is swapped for one that only forces the icon
hidden; restoring puts the original back and runs it once so the built-in
icon recomputes its visibility.

Where the built-in indicator lives depends on the shell version, so it is
located by trying `LOOKUP_STRATEGIES` in order. Nothing in here ever raises
out of `suppress()` or `restore()`: a missing element or an unreachable shell
only means both icons may be visible.
"""
import logging
from typing import Optional

from .exceptions import SuppressionError

log = logging.getLogger(__name__)

# (name, location of the built-in Night Light element inside the shell)
LOOKUP_STRATEGIES: tuple[tuple[str, str], ...] = (
    ("aggregate-menu", "Main.panel.statusArea.aggregateMenu?._nightLight"),
    ("quick-settings", "Main.panel.statusArea.quickSettings?._nightLight"),
)


class ShellHost:
    """
    Capability interface for reaching into the running shell.

    Implementations raise `SuppressionError` when the shell cannot be asked
    or refuses; `patch_sync` and `unpatch_sync` must be safe to repeat.
    """

    def has_element(self, location: str) -> bool:
        raise NotImplementedError

    def patch_sync(self, location: str) -> None:
        raise NotImplementedError

    def unpatch_sync(self, location: str) -> None:
        raise NotImplementedError


class BuiltinIndicatorSuppressor:
    """Owns the Unpatched -> Patched -> Unpatched cycle for one activation."""

    def __init__(self, host: Optional[ShellHost], strategies: tuple[tuple[str, str], ...] = LOOKUP_STRATEGIES):
        self._host = host
        self._strategies = strategies
        self._patched_location: Optional[str] = None

    @property
    def patched(self) -> bool:
        return self._patched_location is not None

    def find_element(self) -> Optional[str]:
        """Returns the location of the first strategy whose element exists."""
        for name, location in self._strategies:
            if self._host.has_element(location):
                log.debug(f"Built-in Night Light indicator found via {name} ({location})")
                return location
        return None

    def suppress(self) -> bool:
        if self.patched:
            log.debug("Built-in indicator already suppressed.")
            return True
        if self._host is None:
            log.info("No shell connection; the built-in indicator stays as it is.")
            return False

        location = None
        try:
            location = self.find_element()
            if location is None:
                log.info("Built-in Night Light indicator not found; nothing to suppress.")
                return False
            self._host.patch_sync(location)
        except SuppressionError as e:
            log.warning(f"Failed to suppress built-in indicator: {e}")
            self._rollback(location)
            return False
        except Exception as e:
            log.exception(f"Unexpected error while suppressing built-in indicator: {e}")
            self._rollback(location)
            return False

        self._patched_location = location
        log.info("Built-in Night Light indicator suppressed.")
        return True

    def _rollback(self, location: Optional[str]):
        if location is None:
            return
        try:
            self._host.unpatch_sync(location)
        except Exception as e:
            log.error(f"Could not roll back partial suppression at {location}: {e}")

    def restore(self) -> bool:
        if not self.patched:
            log.debug("Built-in indicator was never suppressed; nothing to restore.")
            return False

        location = self._patched_location
        self._patched_location = None
        try:
            self._host.unpatch_sync(location)
        except SuppressionError as e:
            log.warning(f"Failed to restore built-in indicator: {e}")
            return False
        except Exception as e:
            log.exception(f"Unexpected error while restoring built-in indicator: {e}")
            return False

        log.info("Built-in Night Light indicator restored.")
        return True
