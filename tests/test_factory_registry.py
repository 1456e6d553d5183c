from unittest.mock import MagicMock

import pytest

from instantiator import FactoryRegistry, InvalidRegistration, Lifecycle, ModeNotRegistered, RegistrationConflict


class Widget:
    def __init__(self, *args, **kwargs):
        self.args = args
        self.kwargs = kwargs


@pytest.fixture
def registry():
    return FactoryRegistry("widget", logger=MagicMock())


# -----------------------------
# Resolution
# -----------------------------
def test_transient_rule_builds_fresh_objects(registry):
    registry.register("default", Widget, Lifecycle.TRANSIENT)

    first = registry.resolve("default", True, 1, size="L")
    second = registry.resolve("default", True, 1, size="L")

    assert first is not second
    assert first.args == (1,) and first.kwargs == {"size": "L"}
    assert registry.cached_modes() == []


def test_singleton_rule_ignores_later_arguments(registry):
    registry.register("test", Widget, Lifecycle.SINGLETON)

    first = registry.resolve("test", False, "a")
    second = registry.resolve("test", False, "b")

    assert first is second
    assert second.args == ("a",)
    assert registry.cached_modes() == ["test"]


def test_fallback_resolves_default_rule(registry):
    registry.register("default", Widget, Lifecycle.SINGLETON)

    assert registry.lookup("staging", True) == "default"
    assert registry.resolve("staging", True) is registry.resolve("default", False)


def test_no_fallback_raises_even_with_default_registered(registry):
    registry.register("default", Widget)

    with pytest.raises(ModeNotRegistered) as exc_info:
        registry.resolve("staging", False)

    assert exc_info.value.type_tag == "widget"
    assert exc_info.value.mode == "staging"
    assert exc_info.value.registered == ["default"]
    registry.logger.warning.assert_called_once()


def test_fallback_without_default_raises(registry):
    registry.register("test", Widget)

    with pytest.raises(ModeNotRegistered):
        registry.resolve("staging", True)
    assert registry.lookup("staging", True) is None


def test_mode_not_registered_is_a_lookup_error(registry):
    with pytest.raises(LookupError):
        registry.resolve("default", True)


def test_rule_errors_propagate_unchanged(registry):
    error = ConnectionError("database unreachable")

    def failing_rule():
        raise error

    registry.register("default", failing_rule, Lifecycle.SINGLETON)

    with pytest.raises(ConnectionError) as exc_info:
        registry.resolve("default", True)
    assert exc_info.value is error
    assert registry.cached_modes() == []


# -----------------------------
# Registration
# -----------------------------
def test_overwrite_drops_cached_singleton_and_warns(registry):
    registry.register("test", lambda: Widget("old"), Lifecycle.SINGLETON)
    registry.register("default", Widget, Lifecycle.SINGLETON)
    old = registry.resolve("test", False)
    default = registry.resolve("default", False)

    registry.register("test", lambda: Widget("new"), Lifecycle.SINGLETON)
    new = registry.resolve("test", False)

    assert new is not old
    assert new.args == ("new",)
    # other modes keep their cached instance
    assert registry.resolve("default", False) is default
    registry.logger.warning.assert_called_once()


def test_overwrite_singleton_with_transient(registry):
    registry.register("default", Widget, Lifecycle.SINGLETON)
    registry.resolve("default", True)

    registry.register("default", Widget, Lifecycle.TRANSIENT)

    assert registry.lifecycle_of("default") is Lifecycle.TRANSIENT
    assert registry.resolve("default", True) is not registry.resolve("default", True)


def test_strict_registry_rejects_conflicts(registry):
    registry.strict = True
    registry.register("default", Widget)

    with pytest.raises(RegistrationConflict):
        registry.register("default", lambda: Widget("other"))
    assert registry.resolve("default", True).args == ()


@pytest.mark.parametrize("mode, rule, lifecycle", [
    ("", Widget, Lifecycle.TRANSIENT),
    (None, Widget, Lifecycle.TRANSIENT),
    ("default", "not callable", Lifecycle.TRANSIENT),
    ("default", Widget, "forever"),
])
def test_invalid_registrations(registry, mode, rule, lifecycle):
    with pytest.raises(InvalidRegistration):
        registry.register(mode, rule, lifecycle)


def test_lifecycle_accepts_string_values(registry):
    registry.register("default", Widget, "singleton")
    assert registry.lifecycle_of("default") is Lifecycle.SINGLETON


def test_populate_runs_once(registry):
    calls = []

    def registration():
        calls.append(registry.is_registering)
        registry.register("default", Widget)

    assert registry.populate(registration) is True
    assert registry.populate(registration) is False
    assert calls == [True]
    assert registry.is_populated
    assert not registry.is_registering


def test_failed_populate_discards_partial_rules(registry):
    def registration():
        registry.register("default", Widget)
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        registry.populate(registration)

    assert not registry.is_populated
    assert registry.modes() == []
    registry.logger.error.assert_called_once()


def test_clear_cache(registry):
    registry.register("default", Widget, Lifecycle.SINGLETON)
    registry.register("test", Widget, Lifecycle.SINGLETON)
    registry.resolve("default", False)
    registry.resolve("test", False)

    registry.clear_cache("test")
    assert registry.cached_modes() == ["default"]

    registry.clear_cache()
    assert registry.cached_modes() == []


def test_nested_populate_from_registration_is_skipped(registry):
    calls = []

    def registration():
        calls.append(1)
        assert registry.populate(registration) is False
        registry.register("default", Widget)

    assert registry.populate(registration) is True
    assert calls == [1]
    registry.logger.error.assert_not_called()
