"""Flight endpoint tests."""
from datetime import datetime, timedelta


def _create(client, headers, payload):
    response = client.post("/api/flights", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_create_flight_distributes_passengers(client, auth_headers, new_flight_payload) -> None:
    flight = _create(client, auth_headers, new_flight_payload("ia201", platform="b12"))

    assert flight["flightNumber"] == "IA201"
    assert flight["platform"] == "B12"
    assert flight["status"] == "Scheduled"
    assert flight["passengers"] == {"total": 200, "economy": 140, "business": 50, "firstClass": 10}
    assert flight["duration"] == 330
    assert flight["isDelayed"] is False


def test_duplicate_flight_number_rejected(client, auth_headers, new_flight_payload) -> None:
    _create(client, auth_headers, new_flight_payload("IA202"))
    response = client.post("/api/flights", json=new_flight_payload("IA202"), headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Flight number already exists"


def test_flight_validation_errors(client, auth_headers, new_flight_payload) -> None:
    payload = new_flight_payload("123", platform="Gate 7")
    response = client.post("/api/flights", json=payload, headers=auth_headers)
    errors = response.json()["errors"]

    assert response.status_code == 400
    assert any("Flight number must be in format" in error for error in errors)
    assert any("Platform must be in format" in error for error in errors)


def test_arrival_must_follow_departure(client, auth_headers, new_flight_payload) -> None:
    departure = datetime.utcnow() + timedelta(days=2)
    payload = new_flight_payload(
        "IA203",
        departureTime=departure.isoformat(),
        arrivalTime=(departure - timedelta(hours=1)).isoformat(),
    )
    response = client.post("/api/flights", json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert any("Arrival time must be after departure time" in error for error in response.json()["errors"])


def test_departure_in_past_rejected(client, auth_headers, new_flight_payload) -> None:
    departure = datetime.utcnow() - timedelta(days=1)
    payload = new_flight_payload(
        "IA204",
        departureTime=departure.isoformat(),
        arrivalTime=(departure + timedelta(hours=2)).isoformat(),
    )
    response = client.post("/api/flights", json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert any("Departure time must be in the future" in error for error in response.json()["errors"])


def test_update_and_status_change(client, auth_headers, new_flight_payload) -> None:
    flight = _create(client, auth_headers, new_flight_payload("IA205"))

    updated = client.put(
        f"/api/flights/{flight['id']}",
        json={"platform": "c3", "passengers": {"total": 300}},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["platform"] == "C3"
    assert updated.json()["data"]["passengers"]["total"] == 300

    delayed = client.patch(
        f"/api/flights/{flight['id']}/status",
        json={"status": "Delayed", "delay": {"duration": 45, "reason": "Weather"}},
        headers=auth_headers,
    )
    data = delayed.json()["data"]
    assert delayed.status_code == 200
    assert delayed.json()["message"] == "Flight status updated successfully"
    assert data["status"] == "Delayed"
    assert data["delay"] == {"duration": 45, "reason": "Weather"}
    assert data["isDelayed"] is True


def test_update_rejects_inverted_schedule(client, auth_headers, new_flight_payload) -> None:
    flight = _create(client, auth_headers, new_flight_payload("IA206"))
    earlier = datetime.fromisoformat(flight["departureTime"]) - timedelta(hours=3)

    response = client.put(
        f"/api/flights/{flight['id']}",
        json={"arrivalTime": earlier.isoformat()},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Arrival time must be after departure time"


def test_list_filters_and_pagination(client, auth_headers, new_flight_payload) -> None:
    _create(client, auth_headers, new_flight_payload("IA207", origin="Sylhet", destination="Muscat"))

    response = client.get("/api/flights", params={"origin": "sylh", "limit": 5}, headers=auth_headers)
    data = response.json()["data"]

    assert response.status_code == 200
    assert [f["flightNumber"] for f in data["flights"]] == ["IA207"]
    assert data["pagination"] == {"current": 1, "total": 1, "count": 1, "totalRecords": 1}


def test_list_rejects_unknown_status(client, auth_headers) -> None:
    response = client.get("/api/flights", params={"status": "Teleported"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid status: Teleported"


def test_flight_stats(client, auth_headers, new_flight_payload) -> None:
    _create(client, auth_headers, new_flight_payload("IA208", aircraft="Airbus A350"))

    data = client.get("/api/flights/stats", headers=auth_headers).json()["data"]

    assert data["totalFlights"] >= 1
    assert data["aircraftTypes"]["Airbus A350"] >= 1
    assert data["totalPassengers"] >= 200
    assert sum(data["statusBreakdown"].values()) == data["totalFlights"]


def test_delete_flight(client, auth_headers, new_flight_payload) -> None:
    flight = _create(client, auth_headers, new_flight_payload("IA209"))

    deleted = client.delete(f"/api/flights/{flight['id']}", headers=auth_headers)
    missing = client.get(f"/api/flights/{flight['id']}", headers=auth_headers)

    assert deleted.json()["message"] == "Flight deleted successfully"
    assert missing.status_code == 404
    assert missing.json()["message"] == "Flight not found"
