"""Batch generator: builds N entries and optionally replays each one."""

import asyncio

import click

from curl_data_gen.generator.entry import EntryAssembler
from curl_data_gen.parser.base import BatchResult, FieldConfig, ReplayOptions, ReplayOutcome, Request
from curl_data_gen.parser.schema import extract_fields
from curl_data_gen.replay import ReplayClient

STRATEGIES = ("sequential", "concurrent")
DEFAULT_MAX_CONCURRENCY = 10


class RequestParseError(ValueError):
    """Raised when generation is attempted on a request that failed to parse."""


class BatchGenerator:
    """Generates entries for a parsed request, sequentially or concurrently."""

    def __init__(
        self,
        assembler: EntryAssembler | None = None,
        replay_client: ReplayClient | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ):
        self.assembler = assembler or EntryAssembler()
        self.replay_client = replay_client or ReplayClient()
        self.max_concurrency = max_concurrency

    def generate(
        self,
        request: Request,
        count: int,
        field_configs: dict[str, FieldConfig] | None = None,
        replay: ReplayOptions | None = None,
        strategy: str = "sequential",
    ) -> BatchResult:
        """Generate ``count`` entries; outcomes are set only when replay is enabled.

        The concurrent strategy runs its own event loop. From async code, await
        ``agenerate`` instead.
        """
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy {strategy!r}, expected one of {STRATEGIES}")
        if strategy == "concurrent":
            return asyncio.run(self.agenerate(request, count, field_configs, replay))

        fields, configs, replay = self._prepare(request, count, field_configs, replay)
        return self._generate_sequential(request, fields, count, configs, replay)

    async def agenerate(
        self,
        request: Request,
        count: int,
        field_configs: dict[str, FieldConfig] | None = None,
        replay: ReplayOptions | None = None,
    ) -> BatchResult:
        """Generate ``count`` entries and replay them concurrently on the running loop."""
        fields, configs, replay = self._prepare(request, count, field_configs, replay)
        entries = [self.assembler.assemble(fields, configs) for _ in range(count)]
        if not replay.enabled:
            return BatchResult(entries=entries)

        outcomes = await self.replay_client.replay_many(
            request, entries, replay.expected_status, self.max_concurrency
        )
        for i, outcome in enumerate(outcomes):
            self._report(i, outcome)
        return BatchResult(entries=entries, outcomes=outcomes)

    def _prepare(self, request, count, field_configs, replay):
        if request.parse_error:
            raise RequestParseError(request.parse_error)
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        return extract_fields(request.body), field_configs or {}, replay or ReplayOptions()

    def _generate_sequential(self, request, fields, count, configs, replay) -> BatchResult:
        entries = []
        outcomes: list[ReplayOutcome] = []
        try:
            for i in range(count):
                entry = self.assembler.assemble(fields, configs)
                entries.append(entry)
                if replay.enabled:
                    outcome = self.replay_client.replay(request, entry, replay.expected_status)
                    self._report(i, outcome)
                    outcomes.append(outcome)
        finally:
            self.replay_client.close()
        return BatchResult(entries=entries, outcomes=outcomes if replay.enabled else None)

    def _report(self, index: int, outcome: ReplayOutcome) -> None:
        if outcome.error:
            click.echo(f"  Replay failed for entry {index + 1}: {outcome.error}", err=True)
