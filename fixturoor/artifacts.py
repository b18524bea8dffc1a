"""Light-client artifacts produced by a generation run.

Every artifact has a JSON form used for the on-disk fixtures: integers stay
JSON numbers, byte strings become 0x-prefixed lowercase hex, and keys appear
in declaration order.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Optional

from .utils import to_hex, from_hex


def _hex_list(values: list[bytes]) -> list[str]:
    return [to_hex(v) for v in values]


def _bytes_list(values: list[str]) -> list[bytes]:
    return [from_hex(v) for v in values]


@dataclass
class BeaconHeader:
    slot: int
    proposer_index: int
    parent_root: bytes
    state_root: bytes
    body_root: bytes

    def to_json(self) -> dict:
        return {
            "slot": self.slot,
            "proposer_index": self.proposer_index,
            "parent_root": to_hex(self.parent_root),
            "state_root": to_hex(self.state_root),
            "body_root": to_hex(self.body_root),
        }

    @classmethod
    def from_json(cls, data: dict) -> "BeaconHeader":
        return cls(
            slot=int(data["slot"]),
            proposer_index=int(data["proposer_index"]),
            parent_root=from_hex(data["parent_root"]),
            state_root=from_hex(data["state_root"]),
            body_root=from_hex(data["body_root"]),
        )


@dataclass
class SyncCommittee:
    pubkeys: list[bytes]
    aggregate_pubkey: bytes

    def to_json(self) -> dict:
        return {
            "pubkeys": _hex_list(self.pubkeys),
            "aggregate_pubkey": to_hex(self.aggregate_pubkey),
        }

    @classmethod
    def from_json(cls, data: dict) -> "SyncCommittee":
        return cls(
            pubkeys=_bytes_list(data["pubkeys"]),
            aggregate_pubkey=from_hex(data["aggregate_pubkey"]),
        )


@dataclass
class SyncAggregate:
    sync_committee_bits: bytes
    sync_committee_signature: bytes

    def to_json(self) -> dict:
        return {
            "sync_committee_bits": to_hex(self.sync_committee_bits),
            "sync_committee_signature": to_hex(self.sync_committee_signature),
        }

    @classmethod
    def from_json(cls, data: dict) -> "SyncAggregate":
        return cls(
            sync_committee_bits=from_hex(data["sync_committee_bits"]),
            sync_committee_signature=from_hex(data["sync_committee_signature"]),
        )


@dataclass
class ExecutionHeader:
    """Deneb-layout execution payload header."""

    parent_hash: bytes
    fee_recipient: bytes
    state_root: bytes
    receipts_root: bytes
    logs_bloom: bytes
    prev_randao: bytes
    block_number: int
    gas_limit: int
    gas_used: int
    timestamp: int
    extra_data: bytes
    base_fee_per_gas: int
    block_hash: bytes
    transactions_root: bytes
    withdrawals_root: bytes
    blob_gas_used: int
    excess_blob_gas: int

    def to_json(self) -> dict:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = value if isinstance(value, int) else to_hex(value)
        return result

    @classmethod
    def from_json(cls, data: dict) -> "ExecutionHeader":
        values = {}
        for f in fields(cls):
            if f.type in (int, "int"):
                values[f.name] = int(data[f.name])
            else:
                values[f.name] = from_hex(data[f.name])
        return cls(**values)


@dataclass
class CheckPoint:
    """Bootstrap state for the on-chain light client."""

    header: BeaconHeader
    current_sync_committee: SyncCommittee
    current_sync_committee_branch: list[bytes]
    validators_root: bytes
    block_roots_root: bytes
    block_roots_branch: list[bytes]

    @property
    def slot(self) -> int:
        return self.header.slot

    def to_json(self) -> dict:
        return {
            "header": self.header.to_json(),
            "current_sync_committee": self.current_sync_committee.to_json(),
            "current_sync_committee_branch": _hex_list(self.current_sync_committee_branch),
            "validators_root": to_hex(self.validators_root),
            "block_roots_root": to_hex(self.block_roots_root),
            "block_roots_branch": _hex_list(self.block_roots_branch),
        }

    @classmethod
    def from_json(cls, data: dict) -> "CheckPoint":
        return cls(
            header=BeaconHeader.from_json(data["header"]),
            current_sync_committee=SyncCommittee.from_json(data["current_sync_committee"]),
            current_sync_committee_branch=_bytes_list(data["current_sync_committee_branch"]),
            validators_root=from_hex(data["validators_root"]),
            block_roots_root=from_hex(data["block_roots_root"]),
            block_roots_branch=_bytes_list(data["block_roots_branch"]),
        )


@dataclass
class NextSyncCommitteeUpdate:
    next_sync_committee: SyncCommittee
    next_sync_committee_branch: list[bytes]

    def to_json(self) -> dict:
        return {
            "next_sync_committee": self.next_sync_committee.to_json(),
            "next_sync_committee_branch": _hex_list(self.next_sync_committee_branch),
        }

    @classmethod
    def from_json(cls, data: dict) -> "NextSyncCommitteeUpdate":
        return cls(
            next_sync_committee=SyncCommittee.from_json(data["next_sync_committee"]),
            next_sync_committee_branch=_bytes_list(data["next_sync_committee_branch"]),
        )


@dataclass
class Update:
    """A sync-committee or finalized-header update.

    ``next_sync_committee_update`` is only set for sync-committee rotations.
    """

    attested_header: BeaconHeader
    sync_aggregate: SyncAggregate
    signature_slot: int
    finalized_header: BeaconHeader
    finality_branch: list[bytes]
    block_roots_root: bytes
    block_roots_branch: list[bytes]
    next_sync_committee_update: Optional[NextSyncCommitteeUpdate] = None

    def to_json(self) -> dict:
        return {
            "attested_header": self.attested_header.to_json(),
            "sync_aggregate": self.sync_aggregate.to_json(),
            "signature_slot": self.signature_slot,
            "next_sync_committee_update": (
                self.next_sync_committee_update.to_json()
                if self.next_sync_committee_update
                else None
            ),
            "finalized_header": self.finalized_header.to_json(),
            "finality_branch": _hex_list(self.finality_branch),
            "block_roots_root": to_hex(self.block_roots_root),
            "block_roots_branch": _hex_list(self.block_roots_branch),
        }

    @classmethod
    def from_json(cls, data: dict) -> "Update":
        return cls(
            attested_header=BeaconHeader.from_json(data["attested_header"]),
            sync_aggregate=SyncAggregate.from_json(data["sync_aggregate"]),
            signature_slot=int(data["signature_slot"]),
            next_sync_committee_update=(
                NextSyncCommitteeUpdate.from_json(data["next_sync_committee_update"])
                if data.get("next_sync_committee_update")
                else None
            ),
            finalized_header=BeaconHeader.from_json(data["finalized_header"]),
            finality_branch=_bytes_list(data["finality_branch"]),
            block_roots_root=from_hex(data["block_roots_root"]),
            block_roots_branch=_bytes_list(data["block_roots_branch"]),
        )


@dataclass
class AncestryProof:
    header_branch: list[bytes]
    finalized_block_root: bytes

    def to_json(self) -> dict:
        return {
            "header_branch": _hex_list(self.header_branch),
            "finalized_block_root": to_hex(self.finalized_block_root),
        }

    @classmethod
    def from_json(cls, data: dict) -> "AncestryProof":
        return cls(
            header_branch=_bytes_list(data["header_branch"]),
            finalized_block_root=from_hex(data["finalized_block_root"]),
        )


@dataclass
class HeaderUpdate:
    """Execution header of a beacon block, proven against a finalized block."""

    header: BeaconHeader
    execution_header: ExecutionHeader
    execution_branch: list[bytes]
    ancestry_proof: Optional[AncestryProof] = None

    def to_json(self) -> dict:
        return {
            "header": self.header.to_json(),
            "ancestry_proof": self.ancestry_proof.to_json() if self.ancestry_proof else None,
            "execution_header": self.execution_header.to_json(),
            "execution_branch": _hex_list(self.execution_branch),
        }

    @classmethod
    def from_json(cls, data: dict) -> "HeaderUpdate":
        return cls(
            header=BeaconHeader.from_json(data["header"]),
            ancestry_proof=(
                AncestryProof.from_json(data["ancestry_proof"])
                if data.get("ancestry_proof")
                else None
            ),
            execution_header=ExecutionHeader.from_json(data["execution_header"]),
            execution_branch=_bytes_list(data["execution_branch"]),
        )


@dataclass
class UpdateResult:
    """An update together with the finalized-state data needed to build proofs."""

    payload: Update
    finalized_header_block_root: bytes
    block_roots_tree: Any = field(default=None, repr=False)


@dataclass
class Proof:
    """Finalized context an ancestry proof is built against."""

    finalized_block_root: bytes
    block_roots_tree: Any = field(repr=False)
    slot: int

    @classmethod
    def from_update(cls, result: UpdateResult) -> "Proof":
        return cls(
            finalized_block_root=result.finalized_header_block_root,
            block_roots_tree=result.block_roots_tree,
            slot=result.payload.finalized_header.slot,
        )
