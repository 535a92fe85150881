from __future__ import annotations

import pytest

from conftest import Product
from recowidget import ControllerClosedError, RecommendedProducts
from recowidget.dispatcher import FetchKind, FetchTarget


def _mount(client, observer, **kwargs) -> RecommendedProducts:
    return RecommendedProducts(client, observer, **kwargs)


def test_mount_dispatches_initial_inputs(client, observer, p1, p2) -> None:
    widget = _mount(client, observer, zone="homepage-hero", recommender="reco-1", products=[p1, p2])

    assert len(client.requests) == 1
    assert client.latest.target == FetchTarget(FetchKind.ZONE, "homepage-hero")
    assert client.latest.products == [p1, p2]
    assert widget.last_target.kind is FetchKind.ZONE


def test_identical_products_do_not_refetch(client, observer, p1, p2) -> None:
    widget = _mount(client, observer, zone="homepage-hero", products=[p1, p2])

    assert widget.update(products=[p1, p2]) is False
    assert len(client.requests) == 1


def test_changed_products_refetch_once(client, observer, p1, p2) -> None:
    widget = _mount(client, observer, zone="homepage-hero", products=[p1])

    assert widget.update(products=[p1, p2]) is True
    assert len(client.requests) == 2
    assert client.latest.products == [p1, p2]

    twin = Product("p2")
    widget.update(products=[p1, twin])
    assert len(client.requests) == 3
    assert client.latest.products[1] is twin


def test_non_sequence_products_keep_snapshot(client, observer, p1) -> None:
    widget = _mount(client, observer, recommender="reco-1", products=[p1])

    assert widget.update(products=None) is False
    assert len(client.requests) == 1
    assert widget.snapshot.products == (p1,)


def test_zone_and_recommender_changes_refetch(client, observer) -> None:
    widget = _mount(client, observer, recommender="reco-1")
    widget.update(recommender="reco-2")
    widget.update(zone="homepage-hero")
    widget.update(recommender="reco-3")

    assert [r.target for r in client.requests] == [
        FetchTarget(FetchKind.RECOMMENDER, "reco-1"),
        FetchTarget(FetchKind.RECOMMENDER, "reco-2"),
        FetchTarget(FetchKind.ZONE, "homepage-hero"),
        FetchTarget(FetchKind.ZONE, "homepage-hero"),
    ]


def test_title_and_options_do_not_refetch(client, observer) -> None:
    widget = _mount(client, observer, zone="homepage-hero", title="Picks")

    assert widget.update(title="More picks", scroll_snap=True) is False
    assert len(client.requests) == 1
    assert widget.title == "More picks"
    assert widget.options == {"scroll_snap": True}


def test_should_fetch_gates_each_change(client, observer, p1) -> None:
    ready = {"value": False}
    widget = _mount(client, observer, zone="homepage-hero", should_fetch=lambda: ready["value"])
    assert client.requests == []

    widget.update(products=[p1])
    assert client.requests == []

    ready["value"] = True
    # flipping the predicate alone is not an input change
    widget.update(should_fetch=lambda: ready["value"])
    assert client.requests == []

    widget.update(zone="pdp")
    assert client.latest.target == FetchTarget(FetchKind.ZONE, "pdp")
    assert client.latest.products == [p1]


def test_should_fetch_error_reaches_caller(client, observer) -> None:
    def broken() -> bool:
        raise ValueError("boom")

    with pytest.raises(ValueError):
        _mount(client, observer, zone="homepage-hero", should_fetch=broken)
    assert client.state.listener_count == 0


def test_failed_update_can_be_retried(client, observer, p1) -> None:
    failing = {"value": False}

    def flaky() -> bool:
        if failing["value"]:
            raise RuntimeError("catalog not ready")
        return True

    widget = _mount(client, observer, zone="homepage-hero", should_fetch=flaky)
    assert len(client.requests) == 1

    failing["value"] = True
    with pytest.raises(RuntimeError):
        widget.update(zone="pdp", products=[p1], title="Picks")
    assert widget.zone == "homepage-hero"
    assert widget.snapshot.products is None
    assert widget.title is None
    assert len(client.requests) == 1

    failing["value"] = False
    assert widget.update(zone="pdp", products=[p1]) is True
    assert len(client.requests) == 2
    assert client.latest.target == FetchTarget(FetchKind.ZONE, "pdp")
    assert client.latest.products == [p1]
    assert widget.zone == "pdp"


def test_mount_subscribes_once(client, observer) -> None:
    widget = _mount(client, observer, zone="homepage-hero")
    assert client.state.listener_count == 1
    widget.close()
    assert client.state.listener_count == 0


def test_removing_targets_keeps_stale_results(client, observer, reco_payload) -> None:
    widget = _mount(client, observer, zone="homepage-hero")
    client.resolve(reco_payload)

    widget.update(zone=None)
    assert len(client.requests) == 1
    surface = widget.render()
    assert surface is not None
    assert [item.id for item in surface.items] == ["x", "y"]


def test_self_elision(client, observer) -> None:
    widget = _mount(client, observer)
    assert widget.render() is None

    widget.update(zone="homepage-hero")
    surface = widget.render()
    assert surface is not None
    assert surface.is_loading is True
    assert surface.items == []

    client.resolve({"recoUUID": "r1", "recs": []})
    assert widget.has_content is False
    assert widget.render() is None


def test_failed_fetch_elides(client, observer) -> None:
    widget = _mount(client, observer, zone="homepage-hero")
    client.fail()
    assert widget.render() is None


def test_title_falls_back_to_display_message(client, observer, reco_payload) -> None:
    widget = _mount(client, observer, zone="homepage-hero", limit=8)
    client.resolve(dict(reco_payload, displayMessage="You may also like"))

    surface = widget.render()
    assert surface.title == "You may also like"
    assert surface.options == {"limit": 8}

    widget.update(title="Complete the look")
    assert widget.render().title == "Complete the look"


def test_end_to_end_impression_fires_once(client, p1, p2, reco_payload) -> None:
    from recowidget import ManualVisibilityObserver

    observer = ManualVisibilityObserver(honour_once=False)
    widget = _mount(client, observer, zone="homepage-hero", products=[p1, p2])
    assert client.latest.target == FetchTarget(FetchKind.ZONE, "homepage-hero")
    assert client.latest.products == [p1, p2]

    client.resolve(reco_payload)
    assert client.impressions == []

    observer.set_visible(widget.element, True)
    assert len(client.impressions) == 1
    event = client.impressions[0]
    assert event.correlation.recommender_name == "reco-1"
    assert event.correlation.reco_uuid == "r1"
    assert [ref.id for ref in event.items] == ["x", "y"]

    observer.set_visible(widget.element, False)
    observer.set_visible(widget.element, True)
    assert len(client.impressions) == 1


def test_impression_waits_for_items(client, observer, reco_payload) -> None:
    widget = _mount(client, observer, zone="homepage-hero")
    observer.set_visible(widget.element)
    assert client.impressions == []

    client.fail()
    assert client.impressions == []

    widget.update(zone="pdp")
    client.resolve(reco_payload)
    assert len(client.impressions) == 1
    assert widget.impression_sent is True

    widget.update(zone="cart")
    client.resolve({"recoUUID": "r9", "recommenderName": "reco-9", "recs": [{"id": "q"}]})
    assert len(client.impressions) == 1


def test_already_visible_element_emits_on_mount(client, observer, reco_payload) -> None:
    element = object()
    observer.set_visible(element)
    client.fetch_by_zone("homepage-hero", [])
    client.resolve(reco_payload)

    widget = _mount(client, observer, zone="homepage-hero", element=element)
    assert widget.is_visible is True
    assert len(client.impressions) == 1


def test_clicks_emit_one_event_each(client, observer, reco_payload) -> None:
    widget = _mount(client, observer, zone="homepage-hero")
    client.resolve(reco_payload)
    surface = widget.render()

    for item in surface.items:
        surface.on_item_click(item)
    surface.tile_props(surface.items[0])["on_click"]()

    assert [event.item.id for event in client.clicks] == ["x", "y", "x"]
    assert all(event.correlation.reco_uuid == "r1" for event in client.clicks)
    assert all(event.correlation.recommender_name == "reco-1" for event in client.clicks)


def test_click_accepts_plain_dict(client, observer, reco_payload) -> None:
    widget = _mount(client, observer, zone="homepage-hero")
    client.resolve(reco_payload)

    widget.handle_item_click({"id": "y", "price": 12.5})
    assert client.clicks[0].item.id == "y"
    assert client.clicks[0].item.price == 12.5


def test_closed_controller_rejects_use(client, observer, reco_payload) -> None:
    widget = _mount(client, observer, zone="homepage-hero")
    widget.close()
    widget.close()

    client.fetch_by_zone("homepage-hero", [])
    client.resolve(reco_payload)
    observer.set_visible(widget.element)
    assert client.impressions == []

    with pytest.raises(ControllerClosedError):
        widget.update(zone="pdp")
    with pytest.raises(ControllerClosedError):
        widget.render()
    with pytest.raises(ControllerClosedError):
        widget.handle_item_click({"id": "x"})
