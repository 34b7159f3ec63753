"""Site-specific rotation flows, keyed by flow name."""
from typing import Dict, List, Optional

from ..flow import Flow
from . import fandom, pcpartpicker, weather, wikipedia, zillow

SITE_FLOWS: Dict[str, Flow] = {
    flow.name: flow
    for flow in (
        pcpartpicker.FLOW,
        fandom.FLOW,
        wikipedia.FLOW,
        weather.FLOW,
        zillow.FLOW,
    )
}


def get_flow(name: str) -> Flow:
    try:
        return SITE_FLOWS[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown flow {name!r}; available: {', '.join(sorted(SITE_FLOWS))}") from None


def find_flow(url: str) -> Optional[Flow]:
    """Return the first flow whose site matches ``url``."""
    return next((f for f in SITE_FLOWS.values() if f.match(url)), None)


def flow_names() -> List[str]:
    return sorted(SITE_FLOWS)
