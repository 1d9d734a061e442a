import threading

from attrbrowser.indices import build_indices
from attrbrowser.navigation import (
    DETAIL,
    LIST,
    Debouncer,
    Navigator,
    Route,
    evaluate_view,
    parse_fragment,
)


def test_parse_fragment() -> None:
    assert parse_fragment("") == Route(view=LIST)
    assert parse_fragment(None) == Route(view=LIST)
    assert parse_fragment("#/") == Route(view=LIST)
    assert parse_fragment("#/other") == Route(view=LIST)
    assert parse_fragment("#/attr/42") == Route(view=DETAIL, record_id="42")
    assert parse_fragment("#/attr/a%20b") == Route(view=DETAIL, record_id="a%20b")
    assert parse_fragment("#/attr/") == Route(view=DETAIL, record_id="")


def test_evaluate_list_view(records) -> None:
    state = evaluate_view(records, "fire", "all", "#/")

    assert state.view == LIST
    assert [r.id for r in state.records] == ["10", "30"]
    assert state.list_view.count_text == "2 results"
    assert state.detail_view is None


def test_evaluate_detail_view(records) -> None:
    state = evaluate_view(records, "fire", "negative", "#/attr/7")

    assert state.view == DETAIL
    assert state.record.name == "Cloak Type"
    assert "<h2>Cloak Type</h2>" in state.html


def test_unknown_id_renders_not_found(records) -> None:
    state = evaluate_view(records, "", "all", "#/attr/42")

    assert state.view == DETAIL
    assert state.record is None
    assert state.detail_view.found is False
    assert "Attribute not found" in state.html


def test_hidden_records_always_listed(records) -> None:
    state = evaluate_view(records, "", "all", "#/")

    assert {"2", "7"} <= {r.id for r in state.records}


def test_evaluate_with_index_matches_scan(records) -> None:
    idx = build_indices(records)
    for fragment in ["#/", "#/attr/10", "#/attr/nope"]:
        assert evaluate_view(records, "mult", "positive", fragment, idx=idx) == \
            evaluate_view(records, "mult", "positive", fragment)


def test_dispatch_is_same_for_every_event_source(records) -> None:
    a = Navigator(records=records, debounce_seconds=60)
    a.on_effect_change("positive")
    a.on_search_input("fire")
    a.flush()

    b = Navigator(records=records, debounce_seconds=60)
    b.controls.query = "fire"
    b.controls.effect = "positive"
    via_fragment = b.on_fragment_change("#/")

    c = Navigator(records=records, debounce_seconds=60)
    c.controls.query = "fire"
    c.controls.effect = "positive"
    via_load = c.on_load()

    assert a.current == via_fragment == via_load


def test_render_callback_receives_each_state(records) -> None:
    seen = []
    nav = Navigator(records=records, on_render=seen.append, debounce_seconds=60)

    nav.on_load()
    nav.on_fragment_change("#/attr/2")
    nav.on_effect_change("neutral")

    assert [s.view for s in seen] == [LIST, DETAIL, DETAIL]
    assert seen[-1].effect == "neutral"


def test_search_input_is_debounced(records) -> None:
    seen = []
    nav = Navigator(records=records, on_render=seen.append, debounce_seconds=60)

    nav.on_search_input("f")
    nav.on_search_input("fi")
    nav.on_search_input("fire")
    assert seen == []

    state = nav.flush()
    assert len(seen) == 1
    assert state.query == "fire"
    assert nav.flush() is None
    nav.close()


def test_debouncer_fires_once_after_quiet_period() -> None:
    fired = threading.Event()
    calls = []

    def fn():
        calls.append(1)
        fired.set()

    d = Debouncer(0.05, fn)
    d.trigger()
    d.trigger()
    d.trigger()

    assert fired.wait(2.0)
    assert calls == [1]
    assert not d.pending


def test_debouncer_cancel() -> None:
    calls = []
    d = Debouncer(60, lambda: calls.append(1))
    d.trigger()
    d.cancel()

    assert d.flush() is False
    assert calls == []


def test_history_back_and_forward(records) -> None:
    nav = Navigator(records=records)
    nav.on_load()
    nav.on_fragment_change("#/attr/2")
    nav.on_fragment_change("#/attr/7")

    assert nav.back() is True
    assert nav.current.record.id == "2"
    assert nav.back() is True
    assert nav.current.view == LIST
    assert nav.back() is False

    assert nav.forward() is True
    assert nav.current.record.id == "2"

    nav.on_fragment_change("#/attr/10")
    assert nav.forward() is False


def test_same_fragment_does_not_grow_history(records) -> None:
    nav = Navigator(records=records)
    nav.on_fragment_change("#/")

    assert nav.back() is False


def test_effect_options_exposed(records) -> None:
    nav = Navigator(records=records)

    assert nav.effect_options[0] == "all"
    assert "none" in nav.effect_options


def test_flush_waits_for_call_already_running() -> None:
    started = threading.Event()
    release = threading.Event()
    calls = []

    def slow():
        started.set()
        release.wait(2.0)
        calls.append(1)

    d = Debouncer(0.0, slow)
    d.trigger()
    assert started.wait(2.0)

    result = []
    t = threading.Thread(target=lambda: result.append(d.flush()))
    t.start()
    t.join(0.1)
    assert t.is_alive()

    release.set()
    t.join(2.0)
    assert result == [False]
    assert calls == [1]


def test_search_flush_leaves_settled_state(records) -> None:
    nav = Navigator(records=records, debounce_seconds=0.0)
    nav.on_search_input("fire")
    nav.flush()

    assert nav.current is not None
    assert nav.current.query == "fire"
    assert [r.id for r in nav.current.records] == ["10", "30"]
