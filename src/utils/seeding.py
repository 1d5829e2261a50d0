"""
Seeding utilities.
"""
import random
from typing import Optional
import numpy as np


def set_seed(seed: Optional[int]) -> None:
    """
    Seed Python's and NumPy's global generators.

    Engines and agents take their own seeds; this covers code that uses the
    global generators (benchmarks, ad-hoc sampling).
    """
    if seed is None:
        return
    random.seed(seed)
    np.random.seed(seed)
