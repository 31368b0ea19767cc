"""Fetch → project → write → (optionally) load, once per run.

Stages run strictly in sequence and are never retried. Whatever goes wrong
is caught here, logged, and reported through `PipelineResult`; nothing
propagates to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ingest.fetcher import FetchError, RemotiveFetcher
from ingest.projector import Row
from ingest.sinks import PipelineStage, Sink, build_sink
from utils.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Outcome of one run."""

    stage: PipelineStage  # DONE or FAILED
    row_count: int = 0
    failed_stage: Optional[PipelineStage] = None

    @property
    def success(self) -> bool:
        return self.stage is PipelineStage.DONE


class JobsPipeline:
    """One-shot ingestion run wired to a fetcher and a sink."""

    def __init__(self, *, fetcher: RemotiveFetcher, sink: Sink) -> None:
        self.fetcher = fetcher
        self.sink = sink
        self.stage = PipelineStage.IDLE

    def _enter(self, stage: PipelineStage) -> None:
        logger.debug(f"[Pipeline] {self.stage.value} -> {stage.value}")
        self.stage = stage

    def _fail(self, row_count: int = 0) -> PipelineResult:
        failed_stage = self.stage
        self.stage = PipelineStage.FAILED
        return PipelineResult(PipelineStage.FAILED, row_count=row_count, failed_stage=failed_stage)

    async def run(self) -> PipelineResult:
        logger.info(f"[Pipeline] Starting run (sink={self.sink.name})")

        self._enter(PipelineStage.FETCHING)
        try:
            async with self.fetcher:
                records = await self.fetcher.fetch()
        except FetchError as e:
            logger.error(f"[Pipeline] {e}", exc_info=True)
            return self._fail()
        except Exception as e:
            logger.error(f"[Pipeline] Unexpected error while fetching: {e}", exc_info=True)
            return self._fail()

        self._enter(PipelineStage.PROJECTING)
        rows: List[Row] = []
        try:
            rows = self.sink.project(records)
            loaded = self.sink.deliver(rows, self._enter)
        except Exception as e:
            logger.error(f"[Pipeline] Failed during {self.stage.value}: {e}", exc_info=True)
            return self._fail(len(rows))

        if not loaded:
            logger.error(f"[Pipeline] Failed during {self.stage.value}")
            return self._fail(len(rows))

        self._enter(PipelineStage.DONE)
        logger.info(f"[Pipeline] ✓ Run complete: {len(rows)} jobs delivered to {self.sink.name} sink")
        return PipelineResult(PipelineStage.DONE, row_count=len(rows))


def build_pipeline(settings: Settings) -> JobsPipeline:
    """Wire the fetcher and the configured sink from settings."""
    return JobsPipeline(
        fetcher=RemotiveFetcher.from_settings(settings),
        sink=build_sink(settings),
    )
