"""Beacon node access and light-client artifact collection."""

from .client import RemoteBeaconClient
from .exceptions import BeaconAPIError, BlockNotFoundError, StateNotFoundError, ProtocolClientError
from .protocol import ProtocolClient
from .syncer import Syncer

__all__ = [
    "RemoteBeaconClient",
    "BeaconAPIError",
    "BlockNotFoundError",
    "StateNotFoundError",
    "ProtocolClientError",
    "ProtocolClient",
    "Syncer",
]
