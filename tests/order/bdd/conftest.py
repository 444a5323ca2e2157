import pytest


@pytest.fixture
def error():
    """Container for the exception raised by a When step."""
    return {"exc": None}


@pytest.fixture
def products():
    """Product ids keyed by name."""
    return {}
