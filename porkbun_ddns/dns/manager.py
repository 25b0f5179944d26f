"""
Dynamic DNS update policy

Keeps the A and/or AAAA record of one name pointed at the public address of
this host. Each address family is handled independently: a failure for one
family is logged and reported but does not prevent the other from running.
"""

from typing import Iterable, NamedTuple, Optional

from ..logger import logger
from .client import PorkbunClient
from .errors import AddressUnavailableError, PorkbunError
from .types import AddressFamily, IPAddressT
from .utils import Decision, reconcile, target_name


class UpdateResult(NamedTuple):
    """Outcome of one address family update"""

    family: AddressFamily
    address: Optional[IPAddressT] = None
    decision: Optional[Decision] = None
    error: Optional[PorkbunError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DDNSUpdater:
    """
    Single-shot updater for one domain/subdomain pair.

    For each requested family:
    1. Ping the provider to learn the public address
    2. Fetch the published records of that family
    3. Reconcile, then edit the stale record or create a missing one
    """

    def __init__(
        self,
        client: PorkbunClient,
        domain: str,
        subdomain: Optional[str] = None,
    ) -> None:
        self._client = client
        self._domain = domain
        self._subdomain = subdomain or None

    @property
    def target_name(self) -> str:
        return target_name(self._domain, self._subdomain)

    def update(self, family: AddressFamily) -> UpdateResult:
        """Bring the record of one address family up to date"""
        record_type = family.record_type.value
        step = f"retrieve public ipv{family} address"
        address: Optional[IPAddressT] = None
        decision: Optional[Decision] = None

        try:
            address = self._client.ping_family(family)
            if address is None:
                raise AddressUnavailableError(family)

            step = f"retrieve previous ipv{family} address"
            published = self._client.fetch_address_records(
                self._domain, family, self._subdomain
            )
            decision = reconcile(address, published, self.target_name).decision

            if decision is Decision.UNCHANGED:
                logger.info(f"current {record_type} record matches public ip address")
            elif decision is Decision.STALE:
                step = f"edit ipv{family} address"
                self._edit(family, address)
                logger.info(f"successfully updated {record_type} record to {address}")
            else:
                step = f"create ipv{family} record"
                record_id = self._client.create_record(
                    self._domain,
                    family.record_type,
                    str(address),
                    name=self._subdomain,
                )
                logger.info(
                    f"successfully created {record_type} record: {address}"
                    + (f" (id {record_id})" if record_id is not None else "")
                )
        except PorkbunError as e:
            logger.error(f"failed to {step}: {e}")
            return UpdateResult(family, address, decision, e)

        return UpdateResult(family, address, decision)

    def _edit(self, family: AddressFamily, address: IPAddressT):
        if family is AddressFamily.IPV4:
            self._client.edit_ipv4_address(self._domain, self._subdomain, address)
        else:
            self._client.edit_ipv6_address(self._domain, self._subdomain, address)

    def run(self, families: Iterable[AddressFamily]) -> list[UpdateResult]:
        """Update every requested family, one after the other"""
        return [self.update(family) for family in families]


def count_failures(results: Iterable[UpdateResult]) -> int:
    return sum(1 for result in results if not result.ok)
