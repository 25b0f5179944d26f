"""
Record reconciliation helpers
"""

from enum import Enum
from typing import NamedTuple, Optional, Sequence

from .types import AddressRecord, IPAddressT


class Decision(str, Enum):
    UNCHANGED = "unchanged"
    STALE = "stale"
    ABSENT = "absent"


class Reconciliation(NamedTuple):
    """Result of comparing the observed address with the published records"""

    decision: Decision
    record: Optional[AddressRecord] = None


def target_name(domain: str, subdomain: Optional[str] = None) -> str:
    """Name the published record is expected to carry"""
    return subdomain if subdomain else domain


def reconcile(
    observed: IPAddressT,
    published: Sequence[AddressRecord],
    target: str,
) -> Reconciliation:
    """
    Decide whether the published record for `target` is up to date.

    Names are compared by exact string equality. If the provider returns
    several records with the target name, the first one wins.

    Args:
        observed: Current public address
        published: Address records returned by the provider
        target: Record name to look for

    Returns:
        UNCHANGED if the record holds `observed`, STALE (with the record) if
        it holds another address, ABSENT if there is no such record
    """
    for record in published:
        if record.name != target:
            continue
        if record.address == observed:
            return Reconciliation(Decision.UNCHANGED, record)
        return Reconciliation(Decision.STALE, record)

    return Reconciliation(Decision.ABSENT)
