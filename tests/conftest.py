import pytest

from starev.config import console_setup
from starev.config import verbose


@pytest.fixture(autouse=True)
def setup_tests():
    verbose.value = 0
    console_setup()
