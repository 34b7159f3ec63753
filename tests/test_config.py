import pytest

from passrotate.core.config import (
    cdp_url_from_env, headless_from_env, read_env, resolve_inputs, session_id_from_env,
)
from passrotate.core.models import InputSpec

SPECS = (
    InputSpec("base_url", ("SITE_BASE_URL",), required=False, default="https://example.com/", is_url=True),
    InputSpec("username", ("SITE_USERNAME", "ROTATE_USERNAME")),
    InputSpec("password", ("SITE_PASSWORD", "ROTATE_PASSWORD"), secret=True),
    InputSpec("new_password", ("SITE_NEW_PASSWORD", "ROTATE_NEW_PASSWORD"), secret=True),
    InputSpec("current_password", ("SITE_CURRENT_PASSWORD",), required=False, secret=True, fallback="password"),
)


class TestReadEnv:
    def test_first_non_empty_wins(self):
        assert read_env(["A", "B"], {"A": "  ", "B": " b "}) == "b"

    def test_nothing_set(self):
        assert read_env(["A"], {}) == ""


class TestResolveInputs:
    def test_aliases_and_defaults(self):
        resolved = resolve_inputs(SPECS, {
            "ROTATE_USERNAME": "alice",
            "SITE_PASSWORD": "P@ss1",
            "ROTATE_NEW_PASSWORD": "P@ss2!",
        })
        assert resolved.ok
        assert resolved.get("username") == "alice"
        assert resolved.get("base_url") == "https://example.com"

    def test_primary_beats_alias(self):
        resolved = resolve_inputs(SPECS, {"SITE_USERNAME": "primary", "ROTATE_USERNAME": "alias"})
        assert resolved.get("username") == "primary"

    def test_fallback_to_another_input(self):
        resolved = resolve_inputs(SPECS, {"SITE_PASSWORD": "P@ss1"})
        assert resolved.get("current_password") == "P@ss1"
        resolved = resolve_inputs(SPECS, {"SITE_PASSWORD": "P@ss1", "SITE_CURRENT_PASSWORD": "other"})
        assert resolved.get("current_password") == "other"

    def test_every_missing_input_is_reported(self):
        resolved = resolve_inputs(SPECS, {"SITE_USERNAME": "", "SITE_PASSWORD": "x"})
        assert [spec.key for spec in resolved.missing] == ["username", "new_password"]
        assert resolved.missing[0].describe() == "SITE_USERNAME (or ROTATE_USERNAME)"

    def test_whitespace_counts_as_missing(self):
        resolved = resolve_inputs(SPECS, {"SITE_USERNAME": "   ", "SITE_PASSWORD": "x", "SITE_NEW_PASSWORD": "y"})
        assert not resolved.ok

    def test_repr_masks_secrets(self):
        resolved = resolve_inputs(SPECS, {"SITE_USERNAME": "alice", "SITE_PASSWORD": "P@ss1",
                                          "SITE_NEW_PASSWORD": "P@ss2!"})
        shown = repr(resolved)
        assert "alice" in shown
        assert "P@ss1" not in shown and "P@ss2!" not in shown

    def test_overrides_leave_original_untouched(self):
        resolved = resolve_inputs(SPECS, {"SITE_PASSWORD": "old"})
        replay = resolved.with_overrides({"password": "new"})
        assert replay.get("password") == "new"
        assert resolved.get("password") == "old"


def test_input_spec_needs_a_variable():
    with pytest.raises(ValueError):
        InputSpec("x", ())


@pytest.mark.parametrize("raw, expected", [("", True), ("1", True), ("false", False), ("0", False), ("Off", False)])
def test_headless_from_env(raw, expected):
    assert headless_from_env({"ROTATE_HEADLESS": raw}) is expected


def test_session_settings_from_env():
    environ = {"ROTATE_SESSION_ID": "abc", "ROTATE_CDP_URL": "ws://localhost:9222/{session_id}"}
    assert session_id_from_env(environ) == "abc"
    assert cdp_url_from_env(environ) == "ws://localhost:9222/{session_id}"
    assert session_id_from_env({}) is None


def test_legacy_session_id_is_read_after_the_primary():
    assert session_id_from_env({"ANCHOR_SESSION_ID": "legacy"}) == "legacy"
    assert session_id_from_env({"ROTATE_SESSION_ID": "new", "ANCHOR_SESSION_ID": "legacy"}) == "new"
