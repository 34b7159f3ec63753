import pytest

from passrotate.automation import waiting

from .fakes import FakePage


@pytest.fixture
def page(monkeypatch):
    """A fake page whose clock drives every deadline in the waiting module."""
    fake = FakePage()
    monkeypatch.setattr(waiting, "monotonic", fake.clock.monotonic)
    return fake
