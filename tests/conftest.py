from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(_ROOT))

# Filler that no palette produces for the small scans used in tests
SENTINEL = np.array([7, 7, 7], dtype=np.uint8)


@pytest.fixture
def sentinel() -> np.ndarray:
    return SENTINEL.copy()
