# Avoid importing Playwright-backed submodules at top-level to keep the CLI import cheap
__version__ = "0.1.0"

__all__ = ["FlowRunner", "RunResult", "SITE_FLOWS"]

def __getattr__(name):
    if name == "FlowRunner":
        from .automation.runner import FlowRunner
        return FlowRunner
    if name == "RunResult":
        from .automation.types import RunResult
        return RunResult
    if name == "SITE_FLOWS":
        from .automation.sites import SITE_FLOWS
        return SITE_FLOWS
    raise AttributeError(name)
