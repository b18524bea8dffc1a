"""Configuration for a fixture generation run."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from .errors import ConfigurationError
from .spec.network_config import ActiveSpec

DEFAULT_ENDPOINT = "http://127.0.0.1:9596"
DEFAULT_FIXTURE_DIR = "parachain/pallets/ethereum-beacon-client/tests/fixtures"
DEFAULT_BENCHMARK_DIR = "parachain/pallets/ethereum-beacon-client/src/benchmarking"
DEFAULT_BENCHMARK_FILENAME = "fixtures.rs"

# EthereumBeaconClient.force_checkpoint
DEFAULT_CHECKPOINT_CALL_INDEX = "0x3200"


@dataclass
class Config:
    """Generation run configuration."""

    spec: str = "minimal"
    endpoint: str = DEFAULT_ENDPOINT
    fixture_dir: str = DEFAULT_FIXTURE_DIR
    benchmark_dir: str = DEFAULT_BENCHMARK_DIR
    benchmark_filename: str = DEFAULT_BENCHMARK_FILENAME
    template_path: str = ""
    relay_config_path: str = ""
    checkpoint_call_index: str = DEFAULT_CHECKPOINT_CALL_INDEX
    sync_wait_seconds: float = 30.0
    chain_advance_slots: int = 5
    header_update_slot_offset: int = 2
    export_json: bool = True
    emit_benchmark_artifacts: Optional[bool] = None
    log_level: str = "INFO"

    @property
    def active_spec(self) -> ActiveSpec:
        return ActiveSpec.from_string(self.spec)

    @property
    def emit_benchmark(self) -> bool:
        """Benchmark emission; when unset it follows the spec (mainnet only)."""
        if self.emit_benchmark_artifacts is None:
            return self.active_spec.is_mainnet()
        return self.emit_benchmark_artifacts

    def fixture_name(self, artifact: str) -> str:
        return f"{artifact}.{self.active_spec.value}.json"

    def beacon_endpoint(self) -> str:
        """The endpoint, checked to be an absolute http(s) URL."""
        parsed = urlparse(self.endpoint or "")
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ConfigurationError(
                f"invalid beacon endpoint {self.endpoint!r}, expected http(s)://host[:port]"
            )
        return self.endpoint
