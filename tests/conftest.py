"""
Pytest configuration and fixtures.
"""
import os
import sys

import numpy as np
import pytest

# Add repository root to path so gameml imports without installation
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def rng():
    """Seeded random state for reproducible feature matrices."""
    return np.random.RandomState(0)
