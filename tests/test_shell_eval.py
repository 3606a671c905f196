"""Tests for the D-Bus Eval shell host, against a recording proxy."""

import pytest

pytest.importorskip("gi")

from gi.repository import GLib  # noqa: E402

from nightlight_toggle_core import LOOKUP_STRATEGIES, BuiltinIndicatorSuppressor, SuppressionError  # noqa: E402
from nightlight_toggle_core.shell_eval import (  # noqa: E402
    EVAL_TIMEOUT_MS,
    ORIGINAL_SYNC_PROPERTY,
    ShellEvalHost,
)

LOCATION = LOOKUP_STRATEGIES[1][1]


class RecordingProxy:
    """Stands in for a Gio.DBusProxy on org.gnome.Shell."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.scripts = []
        self.timeouts = []

    def call_sync(self, method, parameters, flags, timeout, cancellable):
        assert method == "Eval"
        self.scripts.append(parameters.unpack()[0])
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        success, result = self.replies.pop(0) if self.replies else (True, "true")
        return GLib.Variant("(bs)", (success, result))


class TestScripts:
    @pytest.mark.parametrize("method", ["has_element", "patch_sync", "unpatch_sync"])
    def test_rendered_script_is_well_formed(self, method):
        proxy = RecordingProxy()
        getattr(ShellEvalHost(proxy), method)(LOCATION)

        script = proxy.scripts[0]
        assert "{{" not in script and "}}" not in script
        assert "{prelude}" not in script and "{location}" not in script
        assert script.count("{") == script.count("}")
        assert script.count("(") == script.count(")")
        assert "imports.ui.main" in script
        assert LOCATION in script

    def test_patch_and_unpatch_share_the_stash_property(self):
        proxy = RecordingProxy()
        host = ShellEvalHost(proxy)
        host.patch_sync(LOCATION)
        host.unpatch_sync(LOCATION)

        assert all(ORIGINAL_SYNC_PROPERTY in script for script in proxy.scripts)

    def test_short_timeout(self):
        proxy = RecordingProxy()
        ShellEvalHost(proxy).has_element(LOCATION)
        assert proxy.timeouts == [EVAL_TIMEOUT_MS]
        assert EVAL_TIMEOUT_MS <= 500


class TestReplies:
    @pytest.mark.parametrize("result, expected", [("true", True), ("false", False), (" true\n", True)])
    def test_has_element(self, result, expected):
        assert ShellEvalHost(RecordingProxy([(True, result)])).has_element(LOCATION) is expected

    def test_patch_of_missing_element_raises(self):
        with pytest.raises(SuppressionError):
            ShellEvalHost(RecordingProxy([(True, "false")])).patch_sync(LOCATION)

    def test_unpatch_of_missing_element_is_quiet(self):
        ShellEvalHost(RecordingProxy([(True, "false")])).unpatch_sync(LOCATION)

    def test_dbus_error_is_wrapped(self):
        host = ShellEvalHost(RecordingProxy(error=GLib.Error("Timeout was reached")))
        with pytest.raises(SuppressionError, match="Timeout was reached"):
            host.has_element(LOCATION)
        # A timeout may be transient, so the host stays usable.
        assert host.available


class TestRefusal:
    def test_refused_eval_raises_and_is_remembered(self):
        proxy = RecordingProxy([(False, "")])
        host = ShellEvalHost(proxy)

        with pytest.raises(SuppressionError, match="refused"):
            host.has_element(LOCATION)
        with pytest.raises(SuppressionError, match="refused"):
            host.unpatch_sync(LOCATION)

        assert not host.available
        assert len(proxy.scripts) == 1

    def test_suppressor_makes_one_call_per_session_when_refused(self):
        proxy = RecordingProxy([(False, "Eval is disabled")])
        suppressor = BuiltinIndicatorSuppressor(ShellEvalHost(proxy))

        assert suppressor.suppress() is False
        assert suppressor.suppress() is False
        assert not suppressor.patched
        assert len(proxy.scripts) == 1

    def test_suppress_and_restore_round_trip(self):
        # aggregate-menu missing, quick-settings present, patch ok, unpatch ok
        proxy = RecordingProxy([(True, "false"), (True, "true"), (True, "true"), (True, "true")])
        suppressor = BuiltinIndicatorSuppressor(ShellEvalHost(proxy))

        assert suppressor.suppress() is True
        assert suppressor.restore() is True
        assert len(proxy.scripts) == 4
        assert LOOKUP_STRATEGIES[0][1] in proxy.scripts[0]
        assert all(LOCATION in script for script in proxy.scripts[1:])
