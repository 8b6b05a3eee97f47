"""Order numbers shown to customers: ``VK<epoch millis>-<random hex>``.

The random suffix keeps two checkouts in the same millisecond apart.
"""

import time
from uuid import uuid4

ORDER_NUMBER_PREFIX = "VK"


def generate_order_number(now_ms: int | None = None) -> str:
    millis = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    return f"{ORDER_NUMBER_PREFIX}{millis}-{uuid4().hex[:6].upper()}"
