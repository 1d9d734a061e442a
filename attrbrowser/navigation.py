"""
Navigation controller
=====================

Decides which view is active from the location fragment and feeds the query
engine and renderer:

    "#/" or ""        -> list view (current query + effect filter)
    "#/attr/<id>"     -> detail view for record <id>

`evaluate_view` is a pure function of (records, query, effect, fragment).
`Navigator` is the event-driven shell around it: every event source
(load, fragment change, search input, effect change, history) updates the
live controls and then calls the same `dispatch()`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple
import logging
import threading
from .models import AttributeRecord
from .indices import ALL, Indices, build_indices, find_record
from .engine import filter_records
from .render import DetailView, ListView, render_detail, render_list

logger = logging.getLogger(__name__)

DEFAULT_FRAGMENT = "#/"
DETAIL_PREFIX = "#/attr/"
DEBOUNCE_SECONDS = 0.18

LIST = "list"
DETAIL = "detail"

@dataclass(frozen=True)
class Route:
    view: str
    record_id: Optional[str] = None

def parse_fragment(fragment: Optional[str]) -> Route:
    """Map a location fragment to a Route. The id is taken literally."""
    h = fragment or DEFAULT_FRAGMENT
    if h.startswith(DETAIL_PREFIX):
        return Route(view=DETAIL, record_id=h[len(DETAIL_PREFIX):])
    return Route(view=LIST)


@dataclass(frozen=True)
class ViewState:
    """Result of one evaluation: which view is active and what it shows."""
    route: Route
    query: str
    effect: str
    records: Tuple[AttributeRecord, ...] = ()
    record: Optional[AttributeRecord] = None
    list_view: Optional[ListView] = None
    detail_view: Optional[DetailView] = None

    @property
    def view(self) -> str:
        return self.route.view

    @property
    def html(self) -> str:
        if self.detail_view is not None:
            return self.detail_view.html
        return self.list_view.html if self.list_view is not None else ""

def evaluate_view(
    records: Sequence[AttributeRecord],
    query: str,
    effect: str,
    fragment: Optional[str],
    idx: Optional[Indices] = None,
) -> ViewState:
    """Pure view selection + rendering for one (records, query, effect, fragment)."""
    route = parse_fragment(fragment)
    if route.view == DETAIL:
        record = find_record(records, idx, route.record_id or "")
        return ViewState(route=route, query=query, effect=effect,
                         record=record, detail_view=render_detail(record))

    result = filter_records(records, query, effect, idx=idx)
    return ViewState(route=route, query=query, effect=effect,
                     records=result.records, list_view=render_list(result.records))


class Debouncer:
    """Run `fn` once after `delay` seconds of quiet.

    Each trigger() cancels the pending timer and starts a new one.
    A call already running on the timer thread finishes before flush() returns.
    """

    def __init__(self, delay: float, fn: Callable[[], object]) -> None:
        self.delay = delay
        self.fn = fn
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        # held while fn runs (timer thread or flush)
        self._call_lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def trigger(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.delay, lambda: self._fire(timer))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _fire(self, timer: threading.Timer) -> None:
        with self._call_lock:
            with self._lock:
                # superseded by a newer trigger() or taken by flush()
                if self._timer is not timer:
                    return
                self._timer = None
            self.fn()

    def flush(self) -> bool:
        """Run the pending call now. Returns False if nothing was pending."""
        with self._call_lock:
            with self._lock:
                timer, self._timer = self._timer, None
            if timer is None:
                return False
            timer.cancel()
            self.fn()
            return True

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None


@dataclass
class Controls:
    """Live values of the UI controls, read at dispatch time."""
    query: str = ""
    effect: str = ALL
    fragment: str = DEFAULT_FRAGMENT


@dataclass
class Navigator:
    """Event-driven shell around `evaluate_view`.

    The records are loaded once and never change; only `controls` and the
    fragment history move.
    """
    records: Tuple[AttributeRecord, ...]
    on_render: Optional[Callable[[ViewState], None]] = None
    debounce_seconds: float = DEBOUNCE_SECONDS
    idx: Indices = field(init=False)
    controls: Controls = field(default_factory=Controls, init=False)
    current: Optional[ViewState] = field(default=None, init=False)

    # Fragment history (browser back / forward)
    _back: List[str] = field(default_factory=list, init=False)
    _forward: List[str] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.records = tuple(self.records)
        self.idx = build_indices(self.records)
        self._lock = threading.Lock()
        self._search = Debouncer(self.debounce_seconds, self.dispatch)

    @property
    def effect_options(self) -> List[str]:
        return self.idx.effect_options

    # ---------------- Dispatch ----------------
    def dispatch(self) -> ViewState:
        with self._lock:
            c = self.controls
            state = evaluate_view(self.records, c.query, c.effect, c.fragment, idx=self.idx)
            self.current = state
            logger.debug("dispatch fragment=%r query=%r effect=%r -> %s",
                         c.fragment, c.query, c.effect, state.view)
        if self.on_render is not None:
            self.on_render(state)
        return state

    # ---------------- Event sources ----------------
    def on_load(self) -> ViewState:
        return self.dispatch()

    def on_fragment_change(self, fragment: str) -> ViewState:
        fragment = fragment or DEFAULT_FRAGMENT
        if fragment != self.controls.fragment:
            self._back.append(self.controls.fragment)
            self._forward.clear()
        self.controls.fragment = fragment
        return self.dispatch()

    def on_search_input(self, text: str) -> None:
        """Debounced: only the last input of a burst dispatches."""
        self.controls.query = text
        self._search.trigger()

    def on_effect_change(self, value: str) -> ViewState:
        self.controls.effect = value or ALL
        return self.dispatch()

    def flush(self) -> Optional[ViewState]:
        """Dispatch a pending search input immediately."""
        return self.current if self._search.flush() else None

    def close(self) -> None:
        self._search.cancel()

    # ---------------- History ----------------
    def back(self) -> bool:
        if not self._back:
            return False
        self._forward.append(self.controls.fragment)
        self.controls.fragment = self._back.pop()
        self.dispatch()
        return True

    def forward(self) -> bool:
        if not self._forward:
            return False
        self._back.append(self.controls.fragment)
        self.controls.fragment = self._forward.pop()
        self.dispatch()
        return True
