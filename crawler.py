# crawler.py  — breadth-first site crawl with visit limit and checkpoint / resume

from __future__ import annotations

import sys, time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, TextIO

from checkpoint import CheckpointSnapshot, CheckpointStore
from errors import CheckpointError, ConfigurationError, TransportError
from extractor import extract_links
from fetcher import PageFetcher
from linkgraph import CrawlState, LinkGraph
from matcher import compile_fragments
from priority import (
    PathRules,
    ResultRecord,
    additional_entry,
    classify,
    merge_additional,
    sort_results,
)
from scope import CrawlTarget, UrlScope
from settings import CrawlSettings


class CrawlStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CHECKPOINTED = "checkpointed"


@dataclass
class CrawlOutcome:
    status: CrawlStatus
    visited: int
    found: int
    results: Dict[str, ResultRecord] = field(default_factory=dict)
    resume_at: int | None = None    # next node number when checkpointed
    delay: int = 0                  # seconds to wait before resuming

    @property
    def completed(self) -> bool:
        return self.status is CrawlStatus.COMPLETED


class SiteCrawler:
    """
    Single-threaded crawler over one site.

    Pages are fetched one at a time and their links fully recorded before the
    next URL is dequeued. When a time budget is configured the crawler saves a
    snapshot shortly before running out of time and returns CHECKPOINTED; the
    next run with the same session key resumes from that snapshot.
    """

    def __init__(self,
                 settings: CrawlSettings,
                 fetcher: PageFetcher | None = None,
                 store: CheckpointStore | None = None,
                 stream: TextIO | None = None,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep) -> None:
        self.settings = settings.validate()
        if settings.time_budget and store is None:
            raise ConfigurationError("a time budget needs a checkpoint store")

        self.target = CrawlTarget(settings.url)
        self.scope = UrlScope(self.target, settings.disabled, settings.query_urls)
        self.rules = PathRules(
            primary=compile_fragments(settings.primary, self.target.scope),
            normal=compile_fragments(settings.normal, self.target.scope),
            secondary=compile_fragments(settings.secondary, self.target.scope),
        )
        # additional urls outside the crawl scope are dropped
        self.additional = {
            url: additional_entry(p)
            for url, p in settings.additional.items()
            if self.scope.is_in_scope(url)
        }

        self.fetcher = fetcher or PageFetcher(
            user_agent=settings.user_agent,
            auth=settings.credentials,
            timeout=settings.timeout,
        )
        self.store = store
        self.stream = stream
        self.clock = clock
        self.sleep = sleep

        self.state = CrawlState()
        self.graph = LinkGraph(self.state, self.scope)
        self.status = CrawlStatus.IDLE

    # ---------- diagnostics ----------
    def message(self, *fields) -> None:
        print("\t".join(str(f) for f in fields), file=self.stream or sys.stdout, flush=True)

    # ---------- lifecycle ----------
    def _seed(self) -> None:
        """Root first; a stored snapshot, if any, overwrites it."""
        state = CrawlState.seeded(self.target.url)
        if self.store is not None:
            snapshot = self.store.fetch(self.settings.session)
            if snapshot is not None:
                snapshot.restore(state)
        self.state = state
        self.graph = LinkGraph(state, self.scope)

    def _deadline(self, started: float) -> float | None:
        if not self.settings.time_budget:
            return None
        return started + self.settings.time_budget - self.settings.safety_margin

    def visit(self, url: str) -> int:
        """Fetch one page and record its links. Returns the number of new URLs."""
        try:
            page = self.fetcher.fetch(url)
        except TransportError as exc:
            self.message("", "fetch failed", exc.reason)
            return 0

        if not page.is_html:
            return 0

        found = 0
        for link in extract_links(page.text):
            if self.graph.record(url, self.scope.normalize(link)):
                found += 1
        return found

    def run(self) -> CrawlOutcome:
        deadline = self._deadline(self.clock())
        self._seed()
        self.status = CrawlStatus.RUNNING

        state, limit = self.state, self.settings.limit
        while state.queue:
            state.counter += 1
            url = state.pop()
            self.message(state.counter, url)

            if limit and state.counter > limit:
                break

            self.visit(url)

            if deadline is not None and state.queue and self.clock() > deadline:
                return self._checkpoint()

            if self.settings.throttle:
                self.sleep(self.settings.throttle)

        return self._complete()

    def _checkpoint(self) -> CrawlOutcome:
        state = self.state
        try:
            self.store.store(self.settings.session, CheckpointSnapshot.capture(state))
        except CheckpointError:
            raise
        except Exception as exc:
            raise CheckpointError(f"cannot store checkpoint {self.settings.session!r}: {exc}") from exc

        self.status = CrawlStatus.CHECKPOINTED
        resume_at = state.counter + 1
        self.message(f"--- Timeout - will restart at node {resume_at} in {self.settings.delay} seconds --- \n")
        return CrawlOutcome(
            status=self.status,
            visited=state.counter,
            found=len(state.nodes),
            resume_at=resume_at,
            delay=self.settings.delay,
        )

    def _complete(self) -> CrawlOutcome:
        state, limit = self.state, self.settings.limit
        if self.store is not None:
            self.store.delete(self.settings.session)

        # accumulation is over; counters are final from here on
        self.status = CrawlStatus.COMPLETED
        results = classify(state.nodes, self.target.url, self.rules)
        results = sort_results(merge_additional(results, self.additional))

        visited = min(state.counter, limit) if limit else state.counter
        self.message(f"Crawl completed - {visited} nodes visited, {len(results)} nodes found")
        return CrawlOutcome(status=self.status, visited=visited, found=len(results), results=results)


def crawl_site(settings: CrawlSettings, **kwargs) -> CrawlOutcome:
    """One execution cycle. See SiteCrawler for keyword arguments."""
    return SiteCrawler(settings, **kwargs).run()
