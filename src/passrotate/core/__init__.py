"""Configuration and input models shared by every flow."""

from .models import InputSpec, ResolvedInputs
from .config import resolve_inputs, read_env

__all__ = [
    'InputSpec',
    'ResolvedInputs',
    'resolve_inputs',
    'read_env',
]
