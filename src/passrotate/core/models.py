from dataclasses import dataclass, field
from typing import Optional, List, Dict, Tuple


@dataclass(frozen=True)
class InputSpec:
    """A named flow input read from one of several environment variables.

    ``env`` lists the primary variable first, then legacy-compatible aliases.
    ``fallback`` names another input key whose value is used when this one is
    empty.
    """
    key: str
    env: Tuple[str, ...]
    required: bool = True
    default: str = ""
    secret: bool = False
    fallback: Optional[str] = None
    is_url: bool = False
    help: str = ""

    def __post_init__(self):
        if not self.env:
            raise ValueError(f"Input {self.key!r} needs at least one environment variable name")

    @property
    def primary(self) -> str:
        return self.env[0]

    def describe(self) -> str:
        """Name the input the way an operator would set it."""
        if len(self.env) == 1:
            return self.primary
        return f"{self.primary} (or {' / '.join(self.env[1:])})"


@dataclass
class ResolvedInputs:
    """Input values for one run, plus every required input that was missing."""
    values: Dict[str, str] = field(default_factory=dict)
    missing: List[InputSpec] = field(default_factory=list)
    secrets: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.missing

    def get(self, key: str, default: str = "") -> str:
        return self.values.get(key) or default

    def with_overrides(self, overrides: Dict[str, str]) -> "ResolvedInputs":
        values = dict(self.values)
        values.update(overrides)
        return ResolvedInputs(values=values, missing=list(self.missing), secrets=self.secrets)

    def __repr__(self) -> str:
        shown = {k: ("********" if k in self.secrets else v) for k, v in self.values.items()}
        return f"ResolvedInputs(values={shown}, missing={[s.key for s in self.missing]})"
