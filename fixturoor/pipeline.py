"""Fixture generation pipeline.

The pipeline drives a protocol client through four stages, checks that each
artifact agrees with the checkpoint it was collected after, and writes every
artifact as a JSON fixture. On mainnet the four fixtures are also rendered
into the benchmark source file.
"""

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional

import aiohttp

from .artifacts import CheckPoint, HeaderUpdate, Proof, Update
from .beacon.client import RemoteBeaconClient
from .beacon.exceptions import BeaconAPIError, ProtocolClientError
from .beacon.protocol import ProtocolClient
from .beacon.syncer import Syncer
from .benchmark import BenchmarkRenderer
from .canonical import canonicalize
from .config import Config
from .consistency import check_same_period, check_slot_after
from .errors import FixtureError, NetworkError
from .fixtures import FixtureWriter
from .scale import encode_checkpoint_call
from .spec import constants
from .spec.network_config import resolve_spec_settings

logger = logging.getLogger(__name__)

CHECKPOINT_DUMP_FILENAME = "dump-initial-checkpoint.json"

INITIAL_CHECKPOINT = "initial-checkpoint"
SYNC_COMMITTEE_UPDATE = "sync-committee-update"
FINALIZED_HEADER_UPDATE = "finalized-header-update"
EXECUTION_HEADER_UPDATE = "execution-header-update"

NETWORK_ERRORS = (BeaconAPIError, ProtocolClientError, aiohttp.ClientError, asyncio.TimeoutError)


@dataclass
class GeneratedData:
    """Artifacts and files produced by one generate_beacon_data run."""

    checkpoint: CheckPoint
    sync_committee_update: Update
    finalized_update: Update
    header_update: HeaderUpdate
    fixture_paths: list[Path]
    benchmark_path: Optional[Path] = None


class Pipeline:
    def __init__(
        self,
        config: Config,
        client: ProtocolClient,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self.client = client
        self.sleep = sleep
        self.spec = config.active_spec.value
        self.writer = FixtureWriter(config.fixture_dir)

    @contextmanager
    def stage(self, name: str):
        """Run one stage; failures come out as FixtureError stamped with the stage."""
        logger.info(f"Stage started: spec={self.spec}, stage={name}")
        try:
            yield
        except FixtureError as e:
            e.stage = e.stage or name
            e.spec = e.spec or self.spec
            raise
        except NETWORK_ERRORS as e:
            raise NetworkError(
                f"{type(e).__name__}: {e}", stage=name, spec=self.spec
            ) from e
        except Exception as e:
            raise FixtureError(
                f"unexpected {type(e).__name__}: {e}", stage=name, spec=self.spec
            ) from e
        logger.info(f"Stage completed: spec={self.spec}, stage={name}")

    def _write(self, artifact, name: str) -> Path:
        path = self.writer.write(artifact, self.config.fixture_name(name))
        logger.info(f"Wrote fixture: spec={self.spec}, path={path}")
        return path

    async def generate_checkpoint(self) -> str:
        """Fetch a checkpoint and return the hex-encoded force_checkpoint call.

        The call is also printed to stdout so it can be pasted into a
        governance proposal.
        """
        with self.stage("checkpoint"):
            checkpoint = await self.client.get_checkpoint()

        if self.config.export_json:
            with self.stage("write-checkpoint"):
                self.writer.write(checkpoint, CHECKPOINT_DUMP_FILENAME)
                logger.info(f"Created initial sync file: filename={CHECKPOINT_DUMP_FILENAME}")

        with self.stage("encode-checkpoint"):
            call = encode_checkpoint_call(checkpoint, self.config.checkpoint_call_index)

        print(call)
        return call

    async def generate_beacon_data(self) -> GeneratedData:
        """Collect the four light-client artifacts and write them as fixtures."""
        config = self.config
        paths = []

        with self.stage("checkpoint"):
            checkpoint = await self.client.get_checkpoint()
            paths.append(self._write(checkpoint, INITIAL_CHECKPOINT))
            initial_period = self.client.compute_sync_period_at_slot(checkpoint.slot)
            logger.info(f"Initial checkpoint: slot={checkpoint.slot}, period={initial_period}")

        with self.stage("wait"):
            logger.info(f"Waiting for the chain to advance: seconds={config.sync_wait_seconds}")
            await self.sleep(config.sync_wait_seconds)

        with self.stage("sync-committee-update"):
            period = self.client.compute_sync_period_at_slot(
                checkpoint.slot + config.chain_advance_slots
            )
            check_same_period("initialSyncPeriod", initial_period, "syncCommitteePeriod", period)
            result = await self.client.get_sync_committee_period_update(period)
            sync_committee_update = result.payload
            paths.append(self._write(sync_committee_update, SYNC_COMMITTEE_UPDATE))

        with self.stage("finalized-header-update"):
            result = await self.client.get_finalized_update()
            finalized_update = result.payload
            paths.append(self._write(finalized_update, FINALIZED_HEADER_UPDATE))

            signature_period = self.client.compute_sync_period_at_slot(finalized_update.signature_slot)
            check_same_period("initialSyncPeriod", initial_period, "signatureSlotPeriod", signature_period)
            check_slot_after(
                "AttestedHeader slot", finalized_update.attested_header.slot,
                "initialSyncHeaderSlot", checkpoint.slot,
            )

        with self.stage("execution-header-update"):
            proof = Proof.from_update(result)
            slot = proof.slot - config.header_update_slot_offset
            logger.info(f"Fetching header update: slot={slot}, finalized_slot={proof.slot}")
            header_update = await self.client.get_next_header_update_by_slot_with_ancestry_proof(slot, proof)
            paths.append(self._write(header_update, EXECUTION_HEADER_UPDATE))

        generated = GeneratedData(
            checkpoint=checkpoint,
            sync_committee_update=sync_committee_update,
            finalized_update=finalized_update,
            header_update=header_update,
            fixture_paths=paths,
        )

        if config.emit_benchmark:
            with self.stage("benchmark"):
                logger.info("Now updating benchmarking data files")
                generated.benchmark_path = self.render_benchmark(generated)

        logger.info(f"Done: spec={self.spec}")
        return generated

    def render_benchmark(self, generated: GeneratedData) -> Path:
        renderer = BenchmarkRenderer(
            self.config.benchmark_dir,
            self.config.benchmark_filename,
            self.config.template_path or None,
        )
        return renderer.write({
            "checkpoint_update": canonicalize(generated.checkpoint),
            "sync_committee_update": canonicalize(generated.sync_committee_update),
            "finalized_header_update": canonicalize(generated.finalized_update),
            "header_update": canonicalize(generated.header_update),
        })


def build_syncer(config: Config) -> Syncer:
    """Syncer bound to the configured endpoint, with the SSZ preset selected."""
    spec = config.active_spec
    endpoint = config.beacon_endpoint()
    settings = resolve_spec_settings(spec, config.relay_config_path or None)
    constants.set_preset(spec.value)
    logger.info(f"Using beacon endpoint: spec={spec.value}, endpoint={endpoint}")
    return Syncer(RemoteBeaconClient(endpoint), settings)


async def generate_checkpoint(config: Config) -> str:
    syncer = build_syncer(config)
    try:
        return await Pipeline(config, syncer).generate_checkpoint()
    finally:
        await syncer.close()


async def generate_beacon_data(config: Config) -> GeneratedData:
    syncer = build_syncer(config)
    try:
        return await Pipeline(config, syncer).generate_beacon_data()
    finally:
        await syncer.close()
