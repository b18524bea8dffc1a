"""Single-leaf Merkle proofs over remerkleable views."""

from typing import Any

from remerkleable.core import Path
from remerkleable.tree import Node, gindex_bit_iter


def get_generalized_index(ssz_class: Any, *path: Any) -> int:
    ssz_path = Path(ssz_class)
    for item in path:
        ssz_path = ssz_path / item
    return int(ssz_path.gindex())


def build_proof(anchor: Node, leaf_index: int) -> list[bytes]:
    """Sibling roots from ``leaf_index`` up to ``anchor``, leaf side first."""
    if leaf_index <= 1:
        return []
    node = anchor
    proof = []
    bit_iter, _ = gindex_bit_iter(leaf_index)
    for bit in bit_iter:
        # 1 = right as leaf, thus get left
        if bit:
            proof.append(bytes(node.get_left().merkle_root()))
            node = node.get_right()
        else:
            proof.append(bytes(node.get_right().merkle_root()))
            node = node.get_left()

    return list(reversed(proof))


def compute_merkle_proof(obj: Any, *path: Any) -> list[bytes]:
    """Branch proving the field at ``path`` inside ``obj``."""
    gindex = get_generalized_index(type(obj), *path)
    return build_proof(obj.get_backing(), gindex)


def hash_tree_root(obj: Any) -> bytes:
    """Compute the hash tree root of an SSZ object or return bytes directly."""
    if isinstance(obj, bytes):
        if len(obj) == 32:
            return obj
        raise ValueError(f"Expected 32-byte root, got {len(obj)} bytes")

    if hasattr(obj, 'hash_tree_root'):
        return bytes(obj.hash_tree_root())

    raise TypeError(f"Cannot compute hash_tree_root of {type(obj)}")
