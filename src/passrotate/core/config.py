"""
Environment-backed configuration for rotation flows and browser sessions.
"""
import os
import logging
from typing import Mapping, Optional, Sequence

from .models import InputSpec, ResolvedInputs

logger = logging.getLogger(__name__)

SESSION_ID_ENV = "ROTATE_SESSION_ID"
# Names read by earlier rotation scripts; still honoured after the primary name.
LEGACY_SESSION_ID_ENV = "ANCHOR_SESSION_ID"
CDP_URL_ENV = "ROTATE_CDP_URL"
HEADLESS_ENV = "ROTATE_HEADLESS"


def read_env(names: Sequence[str], environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the first non-empty value among ``names``."""
    environ = os.environ if environ is None else environ
    for name in names:
        value = (environ.get(name) or "").strip()
        if value:
            return value
    return ""


def resolve_inputs(specs: Sequence[InputSpec], environ: Optional[Mapping[str, str]] = None) -> ResolvedInputs:
    """Resolve every input spec against the environment.

    All missing required inputs are collected, not just the first one, so an
    operator can fix the whole configuration in one pass.
    """
    values = {}
    for spec in specs:
        value = read_env(spec.env, environ) or spec.default
        values[spec.key] = value.rstrip("/") if spec.is_url else value

    for spec in specs:
        if not values[spec.key] and spec.fallback:
            values[spec.key] = values.get(spec.fallback, "")

    missing = [spec for spec in specs if spec.required and not values[spec.key]]
    secrets = tuple(spec.key for spec in specs if spec.secret)
    for spec in missing:
        logger.debug(f"[config] missing input {spec.key}: {spec.describe()}")
    return ResolvedInputs(values=values, missing=missing, secrets=secrets)


def session_id_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    return read_env([SESSION_ID_ENV, LEGACY_SESSION_ID_ENV], environ) or None


def cdp_url_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    return read_env([CDP_URL_ENV], environ) or None


def headless_from_env(environ: Optional[Mapping[str, str]] = None) -> bool:
    return read_env([HEADLESS_ENV], environ).lower() not in ("0", "false", "no", "off")
