"""Pytest configuration and shared fixtures for fixturoor tests."""

import sys
from hashlib import sha256

import pytest

from fixturoor.artifacts import (
    AncestryProof,
    BeaconHeader,
    CheckPoint,
    ExecutionHeader,
    HeaderUpdate,
    NextSyncCommitteeUpdate,
    SyncAggregate,
    SyncCommittee,
    Update,
    UpdateResult,
)
from fixturoor.config import Config
from fixturoor.spec.network_config import SpecSettings


def pytest_configure(config):
    """Set preset BEFORE the SSZ type module is imported.

    Vector lengths in fixturoor.spec.types are evaluated at class definition
    time, so the module is dropped and the minimal preset selected first.
    """
    sys.modules.pop("fixturoor.spec.types", None)

    from fixturoor.spec.constants import set_preset
    set_preset("minimal")


def is_valid_branch(leaf: bytes, branch: list[bytes], gindex: int, root: bytes) -> bool:
    value = leaf
    for i, node in enumerate(branch):
        if (gindex >> i) & 1:
            value = sha256(node + value).digest()
        else:
            value = sha256(value + node).digest()
    return value == root


def root(n: int) -> bytes:
    return bytes([n]) * 32


def make_header(slot: int) -> BeaconHeader:
    return BeaconHeader(
        slot=slot,
        proposer_index=slot % 7,
        parent_root=root(1),
        state_root=root(2),
        body_root=root(3),
    )


def make_sync_committee(seed: int = 0xAA, size: int = 4) -> SyncCommittee:
    return SyncCommittee(
        pubkeys=[bytes([seed, i]) * 24 for i in range(size)],
        aggregate_pubkey=bytes([seed]) * 48,
    )


def make_checkpoint(slot: int) -> CheckPoint:
    return CheckPoint(
        header=make_header(slot),
        current_sync_committee=make_sync_committee(),
        current_sync_committee_branch=[root(4), root(5)],
        validators_root=root(6),
        block_roots_root=root(7),
        block_roots_branch=[root(8), root(9)],
    )


def make_update(
    attested_slot: int,
    signature_slot: int,
    finalized_slot: int,
    with_next_committee: bool = False,
) -> Update:
    next_update = None
    if with_next_committee:
        next_update = NextSyncCommitteeUpdate(
            next_sync_committee=make_sync_committee(seed=0xBB),
            next_sync_committee_branch=[root(10), root(11)],
        )
    return Update(
        attested_header=make_header(attested_slot),
        sync_aggregate=SyncAggregate(
            sync_committee_bits=b"\xff" * 4,
            sync_committee_signature=b"\x12" * 96,
        ),
        signature_slot=signature_slot,
        next_sync_committee_update=next_update,
        finalized_header=make_header(finalized_slot),
        finality_branch=[root(12), root(13)],
        block_roots_root=root(14),
        block_roots_branch=[root(15)],
    )


def make_execution_header() -> ExecutionHeader:
    return ExecutionHeader(
        parent_hash=root(20),
        fee_recipient=b"\x21" * 20,
        state_root=root(22),
        receipts_root=root(23),
        logs_bloom=b"\x00" * 256,
        prev_randao=root(24),
        block_number=42,
        gas_limit=30_000_000,
        gas_used=21_000,
        timestamp=1_700_000_000,
        extra_data=b"\xca\xfe",
        base_fee_per_gas=7,
        block_hash=root(25),
        transactions_root=root(26),
        withdrawals_root=root(27),
        blob_gas_used=0,
        excess_blob_gas=0,
    )


def make_header_update(slot: int, finalized_block_root: bytes = root(30)) -> HeaderUpdate:
    return HeaderUpdate(
        header=make_header(slot),
        ancestry_proof=AncestryProof(
            header_branch=[root(31), root(32)],
            finalized_block_root=finalized_block_root,
        ),
        execution_header=make_execution_header(),
        execution_branch=[root(33), root(34)],
    )


class StubProtocolClient:
    """Protocol client returning canned artifacts and recording each call."""

    def __init__(
        self,
        settings: SpecSettings,
        checkpoint_slot: int,
        attested_slot: int,
        signature_slot: int,
        finalized_slot: int,
    ):
        self.settings = settings
        self.checkpoint = make_checkpoint(checkpoint_slot)
        self.sync_update = make_update(attested_slot, signature_slot, finalized_slot, with_next_committee=True)
        self.finalized_update = make_update(attested_slot, signature_slot, finalized_slot)
        self.finalized_block_root = root(30)
        self.block_roots_tree = object()
        self.calls = []
        self.closed = False

    async def get_checkpoint(self):
        self.calls.append(("get_checkpoint",))
        return self.checkpoint

    async def get_sync_committee_period_update(self, period):
        self.calls.append(("get_sync_committee_period_update", period))
        return UpdateResult(self.sync_update, self.finalized_block_root, self.block_roots_tree)

    async def get_finalized_update(self):
        self.calls.append(("get_finalized_update",))
        return UpdateResult(self.finalized_update, self.finalized_block_root, self.block_roots_tree)

    async def get_next_header_update_by_slot_with_ancestry_proof(self, slot, proof):
        self.calls.append(("get_next_header_update_by_slot_with_ancestry_proof", slot, proof))
        return make_header_update(slot, proof.finalized_block_root)

    def compute_sync_period_at_slot(self, slot):
        return self.settings.compute_sync_period_at_slot(slot)

    async def close(self):
        self.closed = True

    def called(self, name: str) -> bool:
        return any(call[0] == name for call in self.calls)


class FakeSleep:
    def __init__(self):
        self.waits = []

    async def __call__(self, seconds):
        self.waits.append(seconds)


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def minimal_settings():
    return SpecSettings.for_spec("minimal")


@pytest.fixture
def mainnet_settings():
    return SpecSettings.for_spec("mainnet")


@pytest.fixture
def minimal_config(tmp_path):
    return Config(
        spec="minimal",
        fixture_dir=str(tmp_path / "fixtures"),
        benchmark_dir=str(tmp_path / "benchmarking"),
    )


@pytest.fixture
def mainnet_config(tmp_path):
    return Config(
        spec="mainnet",
        fixture_dir=str(tmp_path / "fixtures"),
        benchmark_dir=str(tmp_path / "benchmarking"),
    )
