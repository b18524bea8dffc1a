"""Light-client artifact collection from a beacon node."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from ..artifacts import (
    AncestryProof,
    BeaconHeader,
    CheckPoint,
    ExecutionHeader,
    HeaderUpdate,
    NextSyncCommitteeUpdate,
    Proof,
    SyncAggregate,
    SyncCommittee,
    Update,
    UpdateResult,
)
from ..merkle import build_proof, compute_merkle_proof, get_generalized_index, hash_tree_root
from ..spec.network_config import SpecSettings
from ..utils import from_hex, to_hex
from .client import RemoteBeaconClient
from .exceptions import BlockNotFoundError, ProtocolClientError

logger = logging.getLogger(__name__)

PARSE_ERRORS = (KeyError, ValueError, TypeError, AttributeError)


@contextmanager
def parsing(what: str):
    """Report a malformed beacon API response as a ProtocolClientError."""
    try:
        yield
    except PARSE_ERRORS as e:
        raise ProtocolClientError(f"malformed {what}: {type(e).__name__}: {e}") from e


def beacon_header_from_api(data: dict) -> BeaconHeader:
    return BeaconHeader(
        slot=int(data["slot"]),
        proposer_index=int(data["proposer_index"]),
        parent_root=from_hex(data["parent_root"]),
        state_root=from_hex(data["state_root"]),
        body_root=from_hex(data["body_root"]),
    )


def sync_committee_from_api(data: dict) -> SyncCommittee:
    return SyncCommittee(
        pubkeys=[from_hex(pk) for pk in data["pubkeys"]],
        aggregate_pubkey=from_hex(data["aggregate_pubkey"]),
    )


def sync_aggregate_from_api(data: dict) -> SyncAggregate:
    return SyncAggregate(
        sync_committee_bits=from_hex(data["sync_committee_bits"]),
        sync_committee_signature=from_hex(data["sync_committee_signature"]),
    )


def branch_from_api(values: list[str]) -> list[bytes]:
    return [from_hex(v) for v in values]


def compute_header_root(header: BeaconHeader) -> bytes:
    from ..spec.types import BeaconBlockHeader

    return hash_tree_root(BeaconBlockHeader(
        slot=header.slot,
        proposer_index=header.proposer_index,
        parent_root=header.parent_root,
        state_root=header.state_root,
        body_root=header.body_root,
    ))


def execution_header_from_payload(payload: Any) -> ExecutionHeader:
    """Build the execution payload header of an SSZ execution payload."""
    return ExecutionHeader(
        parent_hash=bytes(payload.parent_hash),
        fee_recipient=bytes(payload.fee_recipient),
        state_root=bytes(payload.state_root),
        receipts_root=bytes(payload.receipts_root),
        logs_bloom=bytes(payload.logs_bloom),
        prev_randao=bytes(payload.prev_randao),
        block_number=int(payload.block_number),
        gas_limit=int(payload.gas_limit),
        gas_used=int(payload.gas_used),
        timestamp=int(payload.timestamp),
        extra_data=bytes(int(b) for b in payload.extra_data),
        base_fee_per_gas=int(payload.base_fee_per_gas),
        block_hash=bytes(payload.block_hash),
        transactions_root=hash_tree_root(payload.transactions),
        withdrawals_root=hash_tree_root(payload.withdrawals),
        blob_gas_used=int(payload.blob_gas_used),
        excess_blob_gas=int(payload.excess_blob_gas),
    )


def block_roots_branch(tree: Any, slot: int, max_slots_per_historical_root: int) -> list[bytes]:
    """Branch proving the block root of ``slot`` inside a block_roots vector."""
    index = slot % max_slots_per_historical_root
    gindex = get_generalized_index(type(tree), index)
    return build_proof(tree.get_backing(), gindex)


@dataclass
class BlockRootsData:
    tree: Any
    root: bytes
    branch: list[bytes]


class Syncer:
    """Protocol client backed by a standard Beacon API node."""

    def __init__(self, client: RemoteBeaconClient, settings: SpecSettings):
        self.client = client
        self.settings = settings

    def compute_sync_period_at_slot(self, slot: int) -> int:
        return self.settings.compute_sync_period_at_slot(slot)

    async def close(self) -> None:
        await self.client.close()

    def _decode_state(self, fork: str, raw: bytes) -> Any:
        from ..spec.types import STATE_TYPES

        state_type = STATE_TYPES.get(fork)
        if state_type is None:
            raise ProtocolClientError(f"unsupported beacon state fork: {fork or 'unknown'}")
        try:
            return state_type.decode_bytes(raw)
        except Exception as e:
            # remerkleable raises plain Exception on bad offsets and lengths
            raise ProtocolClientError(f"decode {fork} beacon state: {e}") from e

    def _decode_block(self, fork: str, raw: bytes) -> Any:
        from ..spec.types import BLOCK_TYPES

        block_type = BLOCK_TYPES.get(fork)
        if block_type is None:
            raise ProtocolClientError(f"unsupported beacon block fork: {fork or 'unknown'}")
        try:
            return block_type.decode_bytes(raw).message
        except Exception as e:
            raise ProtocolClientError(f"decode {fork} beacon block: {e}") from e

    async def _get_block_roots(self, slot: int) -> BlockRootsData:
        """Block roots vector of the state at ``slot`` and its branch in the state."""
        logger.info(f"Downloading beacon state, this can take a few minutes: slot={slot}")
        fork, raw = await self.client.get_state(str(slot))
        state = self._decode_state(fork, raw)
        tree = state.block_roots
        return BlockRootsData(
            tree=tree,
            root=hash_tree_root(tree),
            branch=compute_merkle_proof(state, "block_roots"),
        )

    async def get_checkpoint(self) -> CheckPoint:
        """Bootstrap from the latest finalized checkpoint of the head state."""
        checkpoints = await self.client.get_finality_checkpoints("head")
        with parsing("finality checkpoints"):
            finalized_root = checkpoints.get("finalized", {}).get("root", "")
            has_root = bool(finalized_root) and any(from_hex(finalized_root))
        if not has_root:
            raise ProtocolClientError("beacon node has no finalized checkpoint yet")

        bootstrap = await self.client.get_light_client_bootstrap(finalized_root)
        with parsing("light client bootstrap"):
            header = beacon_header_from_api(bootstrap["header"]["beacon"])
            current_sync_committee = sync_committee_from_api(bootstrap["current_sync_committee"])
            current_sync_committee_branch = branch_from_api(bootstrap["current_sync_committee_branch"])
        logger.info(f"Fetched bootstrap: slot={header.slot}, root={finalized_root}")

        genesis = await self.client.get_genesis()
        with parsing("genesis"):
            validators_root = from_hex(genesis["genesis_validators_root"])
        block_roots = await self._get_block_roots(header.slot)

        return CheckPoint(
            header=header,
            current_sync_committee=current_sync_committee,
            current_sync_committee_branch=current_sync_committee_branch,
            validators_root=validators_root,
            block_roots_root=block_roots.root,
            block_roots_branch=block_roots.branch,
        )

    async def _update_result(
        self,
        data: dict,
        next_sync_committee_update: NextSyncCommitteeUpdate | None = None,
    ) -> UpdateResult:
        with parsing("light client update"):
            finalized_header = beacon_header_from_api(data["finalized_header"]["beacon"])
            attested_header = beacon_header_from_api(data["attested_header"]["beacon"])
            sync_aggregate = sync_aggregate_from_api(data["sync_aggregate"])
            signature_slot = int(data["signature_slot"])
            finality_branch = branch_from_api(data["finality_branch"])
        if finalized_header.slot == 0:
            raise ProtocolClientError("light client update has no finalized header")

        block_roots = await self._get_block_roots(finalized_header.slot)
        update = Update(
            attested_header=attested_header,
            sync_aggregate=sync_aggregate,
            signature_slot=signature_slot,
            next_sync_committee_update=next_sync_committee_update,
            finalized_header=finalized_header,
            finality_branch=finality_branch,
            block_roots_root=block_roots.root,
            block_roots_branch=block_roots.branch,
        )
        return UpdateResult(
            payload=update,
            finalized_header_block_root=compute_header_root(finalized_header),
            block_roots_tree=block_roots.tree,
        )

    async def get_sync_committee_period_update(self, period: int) -> UpdateResult:
        updates = await self.client.get_light_client_updates(period, 1)
        if not updates:
            raise ProtocolClientError(f"no sync committee update for period {period}")
        with parsing("light client update"):
            data = updates[0]
            attested_slot = int(data["attested_header"]["beacon"]["slot"])
            next_sync_committee_update = NextSyncCommitteeUpdate(
                next_sync_committee=sync_committee_from_api(data["next_sync_committee"]),
                next_sync_committee_branch=branch_from_api(data["next_sync_committee_branch"]),
            )
        attested_period = self.compute_sync_period_at_slot(attested_slot)
        if attested_period != period:
            raise ProtocolClientError(
                f"sync committee update attested period {attested_period} does not match requested period {period}"
            )
        return await self._update_result(data, next_sync_committee_update)

    async def get_finalized_update(self) -> UpdateResult:
        data = await self.client.get_light_client_finality_update()
        return await self._update_result(data)

    async def _get_next_block(self, slot: int, limit: int) -> Any:
        """First block at ``slot`` or later, below ``limit``; skips empty slots."""
        for candidate in range(slot, limit):
            try:
                fork, raw = await self.client.get_block(str(candidate))
            except BlockNotFoundError:
                logger.debug(f"No block at slot {candidate}, trying next slot")
                continue
            return self._decode_block(fork, raw)
        raise ProtocolClientError(f"no block found between slot {slot} and {limit}")

    async def get_next_header_update_by_slot_with_ancestry_proof(
        self, slot: int, proof: Proof
    ) -> HeaderUpdate:
        """Header update for the first block from ``slot``, proven against ``proof``."""
        if slot >= proof.slot:
            raise ProtocolClientError(
                f"header slot {slot} is not before finalized slot {proof.slot}"
            )
        if proof.slot - slot > self.settings.max_slots_per_historical_root:
            raise ProtocolClientError(
                f"header slot {slot} is outside the block roots window of finalized slot {proof.slot}"
            )

        block = await self._get_next_block(slot, proof.slot)
        body = block.body
        header = BeaconHeader(
            slot=int(block.slot),
            proposer_index=int(block.proposer_index),
            parent_root=bytes(block.parent_root),
            state_root=bytes(block.state_root),
            body_root=hash_tree_root(body),
        )
        block_root = compute_header_root(header)

        index = header.slot % self.settings.max_slots_per_historical_root
        leaf = bytes(proof.block_roots_tree[index])
        if leaf != block_root:
            raise ProtocolClientError(
                f"block root {to_hex(block_root)} at slot {header.slot} not found in finalized block roots (got {to_hex(leaf)})"
            )

        return HeaderUpdate(
            header=header,
            ancestry_proof=AncestryProof(
                header_branch=block_roots_branch(
                    proof.block_roots_tree, header.slot, self.settings.max_slots_per_historical_root
                ),
                finalized_block_root=proof.finalized_block_root,
            ),
            execution_header=execution_header_from_payload(body.execution_payload),
            execution_branch=compute_merkle_proof(body, "execution_payload"),
        )
