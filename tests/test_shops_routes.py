import pytest


@pytest.fixture
def applicant(client, register):
    headers, _ = register("kemi@example.com", "barber", "Kemi Braids")
    client.put("/api/barbers/profile", json={"specialties": ["braids"], "hourly_rate": 4000}, headers=headers)
    return headers


def test_create_shop_seats_owner_in_first_seat(client, barber, shop):
    layout = client.get(f"/api/shops/{shop['id']}/layout").json()
    assert len(layout) == 4
    assert layout[0]["status"] == "available"
    assert [s["status"] for s in layout[1:]] == ["empty", "empty", "empty"]
    # two seats per row for a four-seat shop
    assert [(s["row"], s["col"]) for s in layout] == [(0, 0), (0, 1), (1, 0), (1, 1)]

    again = client.post("/api/barber-requests/shops", json={"name": "Second"}, headers=barber)
    assert again.status_code == 409


def test_shop_search_radius_and_distance(client, shop):
    near = client.get("/api/shops", params={"lat": 6.6, "lng": 3.35, "radius": 5}).json()
    assert [s["id"] for s in near] == [shop["id"]]
    assert near[0]["distance"].endswith("km")
    assert near[0]["owner"] == "Tunde Cuts"
    assert near[0]["available_seats"] == 3

    far = client.get("/api/shops", params={"lat": 9.0765, "lng": 7.3986, "radius": 20}).json()
    assert far == []

    by_name = client.get("/api/shops", params={"query": "fresh"}).json()
    assert [s["name"] for s in by_name] == ["Fresh Cuts"]
    assert by_name[0]["distance"] is None


def test_shop_services(client, barber, applicant, shop):
    url = f"/api/shops/{shop['id']}/services"
    created = client.post(url, json={"name": "Haircut", "price": 3000}, headers=barber)
    assert created.status_code == 201
    assert client.post(url, json={"name": "Shave", "price": 1000}, headers=applicant).status_code == 403
    assert [s["name"] for s in client.get(url).json()] == ["Haircut"]


def test_update_shop_resizes_seats(client, barber, shop):
    response = client.put(f"/api/shops/{shop['id']}", json={"total_seats": 2, "name": "Fresh Cuts II"}, headers=barber)
    assert response.status_code == 200
    assert response.json()["name"] == "Fresh Cuts II"
    assert len(client.get(f"/api/shops/{shop['id']}/layout").json()) == 2


def test_update_hours_owner_only(client, barber, applicant, shop):
    hours = {"monday": {"open": "08:00", "close": "20:00", "closed": False}}
    assert client.put(f"/api/shops/{shop['id']}/hours", json={"opening_hours": hours}, headers=applicant).status_code == 403
    response = client.put(f"/api/shops/{shop['id']}/hours", json={"opening_hours": hours}, headers=barber)
    assert response.json()["opening_hours"] == hours


def test_join_request_approval_assigns_first_free_seat(client, barber, applicant, shop):
    submitted = client.post("/api/barber-requests/submit", json={"shop_id": shop["id"], "message": "Hi"}, headers=applicant)
    assert submitted.status_code == 201
    request_id = submitted.json()["id"]

    duplicate = client.post("/api/barber-requests/submit", json={"shop_id": shop["id"]}, headers=applicant)
    assert duplicate.status_code == 409

    incoming = client.get("/api/barber-requests/incoming", headers=barber).json()
    assert [r["id"] for r in incoming] == [request_id]
    owner_notes = client.get("/api/notifications", headers=barber).json()
    assert owner_notes[0]["type"] == "barber_join_request"

    approved = client.put(f"/api/barber-requests/{request_id}/respond", json={"action": "approve"}, headers=barber)
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert approved.json()["seat_number"] == 2

    again = client.put(f"/api/barber-requests/{request_id}/respond", json={"action": "reject"}, headers=barber)
    assert again.status_code == 400

    profile = client.get("/api/barbers/profile", headers=applicant).json()
    assert profile["shop_id"] == shop["id"]
    assert profile["seat_number"] == 2
    assert profile["is_solo"] is False

    seat_statuses = [s["status"] for s in client.get(f"/api/shops/{shop['id']}/layout").json()]
    assert seat_statuses == ["available", "available", "empty", "empty"]

    applicant_notes = client.get("/api/notifications", headers=applicant).json()
    assert applicant_notes[0]["type"] == "join_request_approved"


def test_join_request_rejected(client, barber, applicant, shop):
    request_id = client.post("/api/barber-requests/submit", json={"shop_id": shop["id"]}, headers=applicant).json()["id"]
    rejected = client.put(f"/api/barber-requests/{request_id}/respond", json={"action": "reject"}, headers=barber)
    assert rejected.json()["status"] == "rejected"
    mine = client.get("/api/barber-requests/my-requests", headers=applicant).json()
    assert [r["status"] for r in mine] == ["rejected"]


def test_join_request_taken_seat(client, barber, applicant, shop):
    request_id = client.post(
        "/api/barber-requests/submit",
        json={"shop_id": shop["id"], "seat_number": 1},
        headers=applicant,
    ).json()["id"]
    response = client.put(f"/api/barber-requests/{request_id}/respond", json={"action": "approve"}, headers=barber)
    assert response.status_code == 409


def test_join_full_shop(client, barber, applicant, shop):
    client.put(f"/api/shops/{shop['id']}", json={"total_seats": 1}, headers=barber)
    response = client.post("/api/barber-requests/submit", json={"shop_id": shop["id"]}, headers=applicant)
    assert response.status_code == 400


def test_incoming_requires_shop_owner(client, applicant):
    assert client.get("/api/barber-requests/incoming", headers=applicant).status_code == 403


def test_going_solo_frees_the_seat(client, barber, applicant, shop):
    request_id = client.post("/api/barber-requests/submit", json={"shop_id": shop["id"]}, headers=applicant).json()["id"]
    client.put(f"/api/barber-requests/{request_id}/respond", json={"action": "approve"}, headers=barber)

    profile = client.put("/api/barbers/profile", json={"is_solo": True}, headers=applicant).json()
    assert profile["shop_id"] is None
    assert profile["seat_number"] is None
    assert [b["seat_number"] for b in client.get(f"/api/shops/{shop['id']}/barbers").json()] == [1]
