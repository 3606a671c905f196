# nightlight_toggle_core/shell_eval.py
"""
`ShellHost` implementation that talks to GNOME Shell over D-Bus.

Uses the `org.gnome.Shell.Eval` method. Recent shells only honour Eval in
unsafe mode or for allow-listed callers; when refused, every call raises
`SuppressionError` and the suppressor degrades to leaving the built-in icon
alone.
"""
import logging
from typing import Optional

from gi.repository import Gio, GLib

from .exceptions import SuppressionError
from .suppression import ShellHost

log = logging.getLogger(__name__)

SHELL_BUS_NAME = "org.gnome.Shell"
SHELL_OBJECT_PATH = "/org/gnome/Shell"
SHELL_INTERFACE = "org.gnome.Shell"
# Upper bound for one Eval round trip. Activation makes at most three.
EVAL_TIMEOUT_MS = 500

# Property on the shell element holding its original _sync while patched.
ORIGINAL_SYNC_PROPERTY = "_nightLightToggleOriginalSync"

_PRELUDE = "const Main = imports.ui.main;"

_HAS_ELEMENT_JS = """(function () {{
    {prelude}
    return !!({location});
}})()"""

_PATCH_JS = """(function () {{
    {prelude}
    const element = {location};
    if (!element)
        return false;
    if (!element.{stash}) {{
        element.{stash} = element._sync;
        element._sync = function () {{
            if (this._indicator)
                this._indicator.visible = false;
        }};
    }}
    if (element._indicator)
        element._indicator.visible = false;
    return true;
}})()"""

_UNPATCH_JS = """(function () {{
    {prelude}
    const element = {location};
    if (!element || !element.{stash})
        return false;
    element._sync = element.{stash};
    delete element.{stash};
    element._sync();
    return true;
}})()"""


class ShellEvalHost(ShellHost):
    """
    Reaches the shell's built-in indicator through org.gnome.Shell.Eval.

    Calls are synchronous with a short timeout. Once the bus connection fails
    or the shell refuses Eval, the host stays unavailable and later calls
    raise `SuppressionError` without another round trip.
    """

    def __init__(self, proxy=None):
        self._proxy = proxy
        self._unavailable: Optional[str] = None

    @property
    def available(self) -> bool:
        return self._unavailable is None

    def _get_proxy(self) -> Gio.DBusProxy:
        if self._proxy is None:
            try:
                self._proxy = Gio.DBusProxy.new_for_bus_sync(
                    Gio.BusType.SESSION,
                    Gio.DBusProxyFlags.DO_NOT_LOAD_PROPERTIES,
                    None,
                    SHELL_BUS_NAME,
                    SHELL_OBJECT_PATH,
                    SHELL_INTERFACE,
                    None,
                )
            except GLib.Error as e:
                self._unavailable = f"Cannot connect to {SHELL_BUS_NAME} on the session bus: {e.message}"
                raise SuppressionError(self._unavailable) from e
        return self._proxy

    def _eval(self, script: str) -> str:
        if self._unavailable is not None:
            raise SuppressionError(self._unavailable)
        proxy = self._get_proxy()
        try:
            reply = proxy.call_sync("Eval", GLib.Variant("(s)", (script,)), Gio.DBusCallFlags.NONE, EVAL_TIMEOUT_MS, None)
        except GLib.Error as e:
            raise SuppressionError(f"Shell Eval call failed: {e.message}") from e
        success, result = reply.unpack()
        if not success:
            self._unavailable = f"Shell refused Eval: {result or 'no details'}"
            raise SuppressionError(self._unavailable)
        log.debug(f"Shell Eval returned {result!r}")
        return result

    def _render(self, template: str, location: str) -> str:
        return template.format(prelude=_PRELUDE, location=location, stash=ORIGINAL_SYNC_PROPERTY)

    def has_element(self, location: str) -> bool:
        return self._eval(self._render(_HAS_ELEMENT_JS, location)).strip() == "true"

    def patch_sync(self, location: str) -> None:
        if self._eval(self._render(_PATCH_JS, location)).strip() != "true":
            raise SuppressionError(f"Built-in indicator disappeared from {location} before it could be patched.")

    def unpatch_sync(self, location: str) -> None:
        if self._eval(self._render(_UNPATCH_JS, location)).strip() != "true":
            log.debug(f"Nothing to unpatch at {location}.")
