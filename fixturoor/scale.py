"""SCALE encoding of the checkpoint passed to ``force_checkpoint``.

Layout of the call argument:

    header:                       u64 slot, u64 proposer_index, 3 x H256
    current_sync_committee:       [pubkey; N] (no length prefix), aggregate pubkey
    current_sync_committee_branch Vec<H256>
    validators_root:              H256
    block_roots_root:             H256
    block_roots_branch:           Vec<H256>
"""

from .artifacts import BeaconHeader, CheckPoint, SyncCommittee
from .errors import EncodingError
from .utils import from_hex

U64_MAX = 2**64 - 1


def encode_compact(value: int) -> bytes:
    """Encode a non-negative integer in SCALE compact form."""
    if value < 0:
        raise EncodingError(f"compact value must be non-negative, got {value}")
    if value < 1 << 6:
        return bytes([value << 2])
    if value < 1 << 14:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value < 1 << 30:
        return ((value << 2) | 0b10).to_bytes(4, "little")
    length = (value.bit_length() + 7) // 8
    if length > 67:
        raise EncodingError(f"compact value too large: {value}")
    return bytes([((length - 4) << 2) | 0b11]) + value.to_bytes(length, "little")


def encode_u64(value: int) -> bytes:
    if not 0 <= value <= U64_MAX:
        raise EncodingError(f"u64 out of range: {value}")
    return value.to_bytes(8, "little")


def encode_fixed(value: bytes, size: int) -> bytes:
    if len(value) != size:
        raise EncodingError(f"expected {size} bytes, got {len(value)}")
    return bytes(value)


def encode_hash_vec(values: list[bytes]) -> bytes:
    return encode_compact(len(values)) + b"".join(encode_fixed(v, 32) for v in values)


def encode_beacon_header(header: BeaconHeader) -> bytes:
    return (
        encode_u64(header.slot)
        + encode_u64(header.proposer_index)
        + encode_fixed(header.parent_root, 32)
        + encode_fixed(header.state_root, 32)
        + encode_fixed(header.body_root, 32)
    )


def encode_sync_committee(committee: SyncCommittee) -> bytes:
    pubkeys = b"".join(encode_fixed(pk, 48) for pk in committee.pubkeys)
    return pubkeys + encode_fixed(committee.aggregate_pubkey, 48)


def encode_checkpoint(checkpoint: CheckPoint) -> bytes:
    """SCALE-encode a checkpoint."""
    return (
        encode_beacon_header(checkpoint.header)
        + encode_sync_committee(checkpoint.current_sync_committee)
        + encode_hash_vec(checkpoint.current_sync_committee_branch)
        + encode_fixed(checkpoint.validators_root, 32)
        + encode_fixed(checkpoint.block_roots_root, 32)
        + encode_hash_vec(checkpoint.block_roots_branch)
    )


def encode_checkpoint_call(checkpoint: CheckPoint, call_index: str) -> str:
    """Hex-encode the ``force_checkpoint`` call: 0x + call index + checkpoint."""
    try:
        index = from_hex(call_index)
    except ValueError:
        raise EncodingError(f"call index is not hex: {call_index!r}") from None
    if len(index) != 2:
        raise EncodingError(f"call index must be 2 bytes, got {call_index!r}")
    return "0x" + index.hex() + encode_checkpoint(checkpoint).hex()
