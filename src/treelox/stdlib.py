"""Native functions installed into every global environment."""

from __future__ import annotations

import time
from typing import List

from .runtime import register_stdlib
from .types import LoxNumber, LoxValue

@register_stdlib("clock")
def std_clock(_interpreter, args: List[LoxValue]) -> LoxNumber:
    # whole milliseconds since the Unix epoch
    return LoxNumber(float(time.time_ns() // 1_000_000))
