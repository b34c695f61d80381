#!/usr/bin/env python3
"""
General utilities for the Three-Body Simulator.
"""
import math
from typing import Optional


def try_float(val) -> Optional[float]:
    """Parse val as a finite float; None when it is blank, malformed or infinite."""
    try:
        f = float(val)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(f):
        return None
    return f
