import json

import httpx
import pytest

from mileage.client.components.comment_form import MAX_LENGTH, CommentFormComponent
from mileage.client.components.comment_list import CommentListComponent
from mileage.client.components.dashboard import DashboardComponent
from mileage.client.components.map import DEFAULT_CENTER, GeolocationError, MapComponent, Marker
from mileage.client.components.meetup_card import MeetupCardComponent
from mileage.client.components.meetup_detail import MeetupDetailComponent
from mileage.client.components.meetup_form import MeetupFormComponent
from mileage.client.geocoding import GeocodedLocation

LOCATION = {"address": "1 Trail Rd", "city": "Portland", "state": "OR", "zip_code": "97201", "country": "US"}


def _page(meetups):
    return {"meetups": json.dumps(meetups), "total_pages": 1, "current_page": 1}


@pytest.fixture
async def form(app):
    form = MeetupFormComponent(app.meetups, app.reverse_geocoding, app.zip_lookup)
    yield form
    form.destroy()


# meetup card


async def test_card_derivations(app, make_meetup):
    meetup = make_meetup(1, meetup_participants=[{"id": 1, "user_id": 7, "meetup_id": 1}, {"id": 2, "user_id": 8, "meetup_id": 1}])

    mine = MeetupCardComponent(meetup, 7, app.meetups)
    theirs = MeetupCardComponent(meetup, 9, app.meetups)
    anonymous = MeetupCardComponent(meetup, None, app.meetups)

    assert mine.is_owner and mine.is_participant
    assert not theirs.is_owner and not theirs.is_participant
    assert not anonymous.is_owner and not anonymous.is_participant
    assert mine.participant_count == 2


async def test_card_join_and_leave(app, backend, make_meetup):
    backend.on("GET", "/meetups", json=_page([make_meetup(1)]))
    backend.on("POST", "/meetups/1/join", status=201, json={"id": 5, "user_id": 9, "meetup_id": 1})
    backend.on("DELETE", "/meetups/1/leave", json={"message": "Successfully left the meetup"})
    await app.meetups.load_meetups()

    await MeetupCardComponent(app.meetups.meetups()[0], 9, app.meetups).join()
    card = MeetupCardComponent(app.meetups.meetups()[0], 9, app.meetups)
    assert card.is_participant

    await card.leave()
    assert not MeetupCardComponent(app.meetups.meetups()[0], 9, app.meetups).is_participant


async def test_anonymous_leave_sends_nothing(app, backend, make_meetup):
    await MeetupCardComponent(make_meetup(1), None, app.meetups).leave()

    assert backend.requests == []


# dashboard


async def test_dashboard_loads_and_builds_cards(app, backend, make_meetup):
    app.session.set_user_id(7)
    backend.on("GET", "/meetups", json=_page([make_meetup(1), make_meetup(2, user={"id": 8})]))
    dashboard = DashboardComponent(app.meetups, app.session)

    await dashboard.init()

    assert [card.is_owner for card in dashboard.cards()] == [True, False]


async def test_dashboard_modals_and_escape(app, make_meetup):
    dashboard = DashboardComponent(app.meetups, app.session)

    dashboard.open_modal(make_meetup(1))
    assert dashboard.show_modal()
    assert app.meetups.meetup_to_edit()["id"] == 1

    dashboard.open_detail_modal(1)
    dashboard.on_escape_key()
    assert not dashboard.show_detail_modal()
    assert dashboard.detail_meetup_id() is None
    assert dashboard.show_modal()

    dashboard.on_escape_key()
    assert not dashboard.show_modal()
    assert app.meetups.meetup_to_edit() is None


async def test_dashboard_new_meetup_clears_edit_slot(app, make_meetup):
    dashboard = DashboardComponent(app.meetups, app.session)
    app.meetups.set_meetup_to_edit(make_meetup(1))

    dashboard.open_modal()

    assert app.meetups.meetup_to_edit() is None


async def test_dashboard_delete(app, backend, make_meetup):
    backend.on("GET", "/meetups", json=_page([make_meetup(1)]))
    backend.on("DELETE", "/meetups/1", status=204)
    dashboard = DashboardComponent(app.meetups, app.session)
    await dashboard.init()

    await dashboard.delete_meetup(1)

    assert dashboard.meetups() == []


# meetup form


async def test_form_validation(form):
    errors = form.errors()
    assert set(errors) == {"title", "start_date_time", "end_date_time", "zip_code"}

    form.patch({
        "title": "Hill repeats",
        "start_date_time": "2030-05-04T16:00:00Z",
        "end_date_time": "2030-05-04T15:00:00Z",
        "guests": 0,
        "location": {"zip_code": "97201"},
    })

    assert set(form.errors()) == {"end_date_time", "guests"}


async def test_form_patches_from_meetup_to_edit(app, form, make_meetup):
    app.meetups.set_meetup_to_edit(make_meetup(3, title="Bridge loop", activity="bicycle"))

    assert form.form["title"] == "Bridge loop"
    assert form.form["activity"] == "bicycle"
    assert form.form["location"]["city"] == "Portland"

    app.meetups.clear_meetup_to_edit()
    assert form.form["title"] == "Bridge loop"


async def test_form_submit_creates(app, backend, form, make_meetup):
    backend.on("POST", "/meetups", status=201, json=make_meetup(101))
    form.patch({
        "title": "Saturday long run",
        "start_date_time": "2030-05-04T14:00:00Z",
        "end_date_time": "2030-05-04T16:00:00Z",
        "guests": "3",
        "location": LOCATION,
    })

    assert await form.submit()

    sent = backend.body("POST", "/meetups")["meetup"]
    assert sent["guests"] == 3
    assert sent["location_attributes"]["zip_code"] == "97201"
    assert form.show_form() is False
    assert form.submitting() is False
    assert form.form["title"] == ""


async def test_form_submit_updates_when_editing(app, backend, form, make_meetup):
    backend.on("PUT", "/meetups/3", json=make_meetup(3, title="Renamed"))
    app.meetups.set_meetup_to_edit(make_meetup(3))
    form.patch({"title": "Renamed"})

    assert await form.submit()

    assert backend.body("PUT", "/meetups/3")["meetup"]["title"] == "Renamed"
    assert app.meetups.meetup_to_edit() is None


async def test_invalid_form_is_not_sent(backend, form):
    assert not await form.submit()
    assert backend.requests == []


async def test_form_reverse_geocodes_selected_point(backend, form):
    backend.on("GET", "/reverse", json={"address": {"road": "Main St", "city": "Bend", "state": "Oregon", "postcode": "97701", "country_code": "us"}})

    await form.on_coordinates_selected(44.05, -121.31)

    assert form.form["location"] == {"address": "Main St", "zip_code": "97701", "city": "Bend", "state": "Oregon", "country": "US"}
    assert form.is_reverse_geocoding() is False


async def test_form_zip_lookup_fills_city_and_state(backend, form):
    backend.on("GET", "/us/97034", json={"places": [{"place name": "Lake Oswego", "state abbreviation": "OR"}]})
    form.patch({"location": {"zip_code": "97034"}})

    await form.lookup_zip()

    assert form.form["location"]["city"] == "Lake Oswego"
    assert form.form["location"]["state"] == "OR"


# meetup detail


async def test_detail_seeds_comments_and_clears_on_destroy(app, backend, make_meetup):
    comments = [{"id": 1, "content": "see you"}]
    backend.on("GET", "/meetups/101", json={**make_meetup(101), "comments": comments})
    detail = MeetupDetailComponent(app.meetups, app.comments, 101)

    await detail.init()

    assert detail.meetup()["id"] == 101
    assert app.comments.comments() == comments

    detail.destroy()
    assert app.comments.comments() == []
    assert app.comments.current_page() == 1
    assert app.meetups.meetup_detail() is None


# comments


async def test_comment_form_counts_and_submits(app, backend):
    backend.on("POST", "/meetups/5/comments", status=201, json={"id": 1, "content": "hello"})
    form = CommentFormComponent(app.comments, 5)

    form.set_content("hello")
    assert form.char_count() == 5

    assert await form.submit()
    assert form.content() == ""
    assert form.char_count() == 0
    assert app.comments.comments() == [{"id": 1, "content": "hello"}]
    form.destroy()


async def test_comment_form_limits(app, backend):
    form = CommentFormComponent(app.comments, 5)

    form.set_content("   ")
    assert not await form.submit()
    form.set_content("x" * (MAX_LENGTH + 1))
    assert not await form.submit()

    assert backend.requests == []


async def test_comment_list_paging(app, backend):
    def page(request):
        number = int(request.url.params["page"])
        body = {"comments": json.dumps([{"id": number}]), "total_pages": 2, "current_page": number}
        return httpx.Response(200, json=body)

    backend.on("GET", "/meetups/5/comments", handler=page)
    comment_list = CommentListComponent(app.comments, 5)

    await comment_list.go_to(1)
    assert comment_list.has_next and not comment_list.has_previous

    await comment_list.next_page()
    assert comment_list.current_page() == 2
    assert comment_list.comments() == [{"id": 2}]

    await comment_list.next_page()
    assert len(backend.requests) == 2

    await comment_list.previous_page()
    assert comment_list.current_page() == 1


# map


async def test_map_without_location_uses_country_view(app):
    widget = MapComponent(app.geocoding, app.toasts)

    assert widget.view_options().center == DEFAULT_CENTER
    assert widget.view_options().zoom == 4
    assert widget.layers() == []


async def test_map_centers_on_geocoded_location(app, backend):
    backend.on("GET", "/search", json=[{"lat": "45.5", "lon": "-122.6", "display_name": "Portland"}])
    widget = MapComponent(app.geocoding, app.toasts)

    await widget.set_location(LOCATION)

    assert widget.geocoded() == GeocodedLocation(45.5, -122.6, "Portland")
    assert widget.view_options().center == (45.5, -122.6)
    assert widget.view_options().zoom == 14
    assert widget.layers() == [Marker(45.5, -122.6, "geocoded")]


async def test_map_has_no_view_until_resolved(app, backend):
    backend.on("GET", "/search", json=[])
    widget = MapComponent(app.geocoding, app.toasts)

    await widget.set_location(LOCATION)

    assert widget.view_options() is None


async def test_map_click_only_when_interactive(app):
    selected = []
    passive = MapComponent(app.geocoding, app.toasts, on_coordinates_selected=lambda lat, lng: selected.append((lat, lng)))
    active = MapComponent(app.geocoding, app.toasts, interactive=True, on_coordinates_selected=lambda lat, lng: selected.append((lat, lng)))

    await passive.on_map_click(1.0, 2.0)
    await active.on_map_click(3.0, 4.0)

    assert selected == [(3.0, 4.0)]
    assert passive.layers() == []
    assert active.layers() == [Marker(3.0, 4.0, "placed")]


async def test_map_markers_are_independent(app, backend):
    backend.on("GET", "/search", json=[{"lat": "45.5", "lon": "-122.6", "display_name": "Portland"}])
    widget = MapComponent(app.geocoding, app.toasts, interactive=True)

    await widget.set_location(LOCATION)
    await widget.on_map_click(45.6, -122.7)

    assert [m.kind for m in widget.layers()] == ["geocoded", "placed"]


async def test_locate_me(app, messages):
    selected = []
    widget = MapComponent(app.geocoding, app.toasts, on_coordinates_selected=lambda lat, lng: selected.append((lat, lng)))

    async def geolocator():
        return 40.0, -105.0

    await widget.locate_me(geolocator)

    assert selected == [(40.0, -105.0)]
    assert widget.layers() == [Marker(40.0, -105.0, "placed")]
    assert messages() == []


async def test_locate_me_failures(app, messages):
    widget = MapComponent(app.geocoding, app.toasts)

    async def denied():
        raise GeolocationError("User denied Geolocation")

    await widget.locate_me(None)
    await widget.locate_me(denied)

    assert messages() == [
        ("error", "Geolocation is not supported by your browser."),
        ("error", "Location permission denied."),
    ]
    assert widget.layers() == []


async def test_map_feeds_form_coordinates(app, backend, form):
    backend.on("GET", "/reverse", json={"address": {"hamlet": "Old Town", "town": "Lake Oswego", "country_code": "us"}})
    widget = MapComponent(app.geocoding, app.toasts, interactive=True, on_coordinates_selected=form.on_coordinates_selected)

    await widget.on_map_click(45.42, -122.67)

    assert form.form["location"]["address"] == "Old Town"
    assert form.form["location"]["city"] == "Lake Oswego"
