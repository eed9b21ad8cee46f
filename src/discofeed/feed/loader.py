"""Feed loader: drives fetches through each feed's load-status FSM.

``request_load()`` is synchronous. It applies the guard, performs the
state transition, snapshots the query and schedules the fetch as an
asyncio task, returning that task (or None when the request is dropped).

Every request carries a monotonically increasing per-feed token. When a
fetch completes, its result is applied only if its token is still the
feed's latest; otherwise it is a stale response and is discarded. This
is what keeps rapid filter changes from showing mismatched results.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from discofeed.exceptions import AppendBeforeResetError, FetchFailure
from discofeed.feed.store import FeedAccess, FeedState, QuerySnapshot, SelectionAccess
from discofeed.models import FeedKind, Item, LoadMode, LoadOutcome, LoadStatus
from discofeed.services.ports import Fetcher, Notifier
from discofeed.telemetry import Telemetry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadRequest:
    """Snapshot of one fetch: what to fetch and which token it answers to."""

    kind: FeedKind
    mode: LoadMode
    token: int
    page: int
    plugin_id: str
    filters: dict[str, str] = field(default_factory=dict)
    keyword: str = ""


def _checked_items(result: object) -> list[Item]:
    """Materialise a fetch result, raising TypeError unless it is a sequence of Items."""
    if result is None or isinstance(result, (str, bytes, dict)):
        raise TypeError(f"fetch returned {type(result).__name__}, expected a list of Item")
    items = list(result)  # type: ignore[call-overload]
    for entry in items:
        if not isinstance(entry, Item):
            raise TypeError(f"fetch returned a {type(entry).__name__} entry, expected Item")
    return items


class FeedLoader:
    """Issues discovery and search fetches and applies their results.

    Args:
        store: Feed states and the shared item dictionary.
        selection: Filter selection and search query, read when a request
            is snapshotted.
        fetcher: Data source collaborator.
        notifier: Receives FetchFailure for the latest request of a feed.
        telemetry: Tracer for ``feed.load`` spans. Defaults to a no-op.
    """

    def __init__(
        self,
        store: FeedAccess,
        selection: SelectionAccess,
        fetcher: Fetcher,
        notifier: Notifier | None = None,
        telemetry: Telemetry | None = None,
    ) -> None:
        self._store = store
        self._selection = selection
        self._fetcher = fetcher
        self._notifier = notifier
        self._telemetry = telemetry if telemetry is not None else Telemetry.noop()
        self._tasks: set[asyncio.Task] = set()

    @property
    def telemetry(self) -> Telemetry:
        return self._telemetry

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def request_load(
        self,
        kind: FeedKind,
        mode: LoadMode = LoadMode.RESET,
        *,
        supersede: bool = False,
    ) -> asyncio.Task | None:
        """Start a reset or append fetch for the *kind* feed.

        Args:
            kind: Which feed to load.
            mode: RESET replaces the feed's ids (page 1); APPEND extends them.
            supersede: For RESET only, replace an in-flight request instead of
                being dropped by the Pending guard.

        Returns:
            The scheduled fetch task resolving to a LoadOutcome, or None if the
            request was dropped (Pending guard, or append to an exhausted feed).

        Raises:
            AppendBeforeResetError: APPEND requested while the feed is Default.
        """
        kind, mode = FeedKind(kind), LoadMode(mode)
        feed = self._store.feed(kind)
        status = feed.load_status

        if status is LoadStatus.PENDING and not (supersede and mode is LoadMode.RESET):
            logger.debug("Dropped %s %s load: feed is pending", kind.value, mode.value)
            return None

        if mode is LoadMode.APPEND:
            if status is LoadStatus.DEFAULT:
                raise AppendBeforeResetError(kind)
            if feed.exhausted:
                logger.debug("Dropped %s append: feed exhausted", kind.value)
                return None

        token = feed.issue_token()
        if mode is LoadMode.RESET:
            feed.ordered_ids.clear()
            feed.page = 0
            feed.exhausted = False
            page = 1
        else:
            page = feed.page + 1

        if status is LoadStatus.PENDING:
            feed.fsm.supersede()
        else:
            feed.fsm.start()

        if mode is LoadMode.RESET:
            request = self._snapshot(kind, mode, token, page)
            feed.query = QuerySnapshot(request.plugin_id, dict(request.filters), request.keyword)
        else:
            # Later pages continue the query the feed was reset with
            query = feed.query
            request = LoadRequest(
                kind, mode, token, page,
                plugin_id=query.plugin_id, filters=dict(query.filters), keyword=query.keyword,
            )
        logger.info(
            "Requested %s %s load #%d (page %d, plugin %s)",
            kind.value, mode.value, token, page, request.plugin_id,
        )

        task = asyncio.get_running_loop().create_task(self._run(feed, request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every in-flight fetch to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _snapshot(self, kind: FeedKind, mode: LoadMode, token: int, page: int) -> LoadRequest:
        if kind is FeedKind.SEARCH:
            query = self._selection.get_search_query()
            return LoadRequest(
                kind, mode, token, page, plugin_id=query.plugin_id, keyword=query.keyword
            )
        selection = self._selection.get_selection()
        return LoadRequest(
            kind, mode, token, page,
            plugin_id=selection.plugin_id,
            filters=selection.to_filters(),
        )

    async def _fetch(self, request: LoadRequest) -> list[Item]:
        if request.kind is FeedKind.SEARCH:
            return await self._fetcher.fetch_search(
                request.plugin_id, request.keyword, request.page
            )
        return await self._fetcher.fetch_discovery(
            request.plugin_id, dict(request.filters), request.page
        )

    def _is_latest(self, feed: FeedState, request: LoadRequest) -> bool:
        return feed is self._store.feed(request.kind) and request.token == feed.latest_token

    async def _run(self, feed: FeedState, request: LoadRequest) -> LoadOutcome:
        with self.telemetry.span(
            "feed.load",
            **{
                "feed.kind": request.kind.value,
                "feed.mode": request.mode.value,
                "feed.token": request.token,
                "feed.page": request.page,
                "feed.plugin": request.plugin_id,
            },
        ) as span:
            try:
                items = _checked_items(await self._fetch(request))
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                span.record_exception(exc)
                outcome = self._reject(feed, request, exc)
            else:
                span.set_attribute("feed.item_count", len(items))
                outcome = self._fulfil(feed, request, items)
            span.set_attribute("feed.outcome", outcome.value)
            return outcome

    def _fulfil(self, feed: FeedState, request: LoadRequest, items: list[Item]) -> LoadOutcome:
        # Upserting is harmless even for a superseded response
        self._store.upsert_items(items)

        if not self._is_latest(feed, request):
            logger.debug(
                "Discarded stale %s response #%d (latest #%d)",
                request.kind.value, request.token, feed.latest_token,
            )
            return LoadOutcome.STALE

        seen = set(feed.ordered_ids)
        added = 0
        for item in items:
            if item.id not in seen:
                seen.add(item.id)
                feed.ordered_ids.append(item.id)
                added += 1

        feed.page = request.page
        feed.exhausted = added == 0
        feed.last_error = None
        feed.fsm.succeed()
        logger.info(
            "Applied %s %s response #%d: %d new ids, %d total",
            request.kind.value, request.mode.value, request.token, added, len(feed.ordered_ids),
        )
        return LoadOutcome.APPLIED

    def _reject(self, feed: FeedState, request: LoadRequest, exc: Exception) -> LoadOutcome:
        if not self._is_latest(feed, request):
            logger.debug(
                "Discarded stale %s failure #%d: %r", request.kind.value, request.token, exc
            )
            return LoadOutcome.STALE

        failure = FetchFailure(request.kind, request.token, exc)
        feed.last_error = failure
        feed.fsm.fail()
        logger.error("%s", failure)

        if self._notifier is not None:
            try:
                self._notifier.notify_error(failure)
            except Exception:
                logger.exception("Notifier raised while reporting %s", failure)
        return LoadOutcome.FAILED
