"""Capabilities the pipeline needs from a beacon protocol client."""

from typing import Protocol

from ..artifacts import CheckPoint, HeaderUpdate, Proof, UpdateResult


class ProtocolClient(Protocol):
    async def get_checkpoint(self) -> CheckPoint:
        ...

    async def get_sync_committee_period_update(self, period: int) -> UpdateResult:
        ...

    async def get_finalized_update(self) -> UpdateResult:
        ...

    async def get_next_header_update_by_slot_with_ancestry_proof(
        self, slot: int, proof: Proof
    ) -> HeaderUpdate:
        ...

    def compute_sync_period_at_slot(self, slot: int) -> int:
        ...

    async def close(self) -> None:
        ...
