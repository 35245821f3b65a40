"""
Pytest fixtures for the automata_lab tests.
"""

import pytest

from automata_lab.config import AutomataConfig
from regex_samples import all_strings


@pytest.fixture
def default_config():
    """Configuration with defaults, independent of the environment."""
    return AutomataConfig()


@pytest.fixture
def dragon_book_pattern():
    """The classic example from the followpos construction."""
    return "(a|b)*abb"


@pytest.fixture
def sample_strings():
    """Strings over {a, b, c} plus a few with a foreign symbol."""
    return all_strings("abc", 4) + ["x", "ax", "abbx"]
