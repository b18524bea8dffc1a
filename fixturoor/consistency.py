"""Cross-artifact consistency checks.

The predicates are pure; the ``check_*`` helpers raise ``ConsistencyError``
naming both compared values.
"""

from .errors import ConsistencyError
from .spec.network_config import SpecSettings


def sync_period(slot: int, settings: SpecSettings) -> int:
    return settings.compute_sync_period_at_slot(slot)


def same_period(slot_a: int, slot_b: int, settings: SpecSettings) -> bool:
    return sync_period(slot_a, settings) == sync_period(slot_b, settings)


def slot_after(a: int, b: int) -> bool:
    return a > b


def check_same_period(label_a: str, period_a: int, label_b: str, period_b: int) -> None:
    """Require two already-computed sync periods to match."""
    if period_a != period_b:
        raise ConsistencyError(
            f"{label_a} {period_a} should be consistent with {label_b} {period_b}",
            left=period_a,
            right=period_b,
        )


def check_slot_after(label_a: str, a: int, label_b: str, b: int) -> None:
    if not slot_after(a, b):
        raise ConsistencyError(
            f"{label_a} {a} should be greater than {label_b} {b}",
            left=a,
            right=b,
        )
