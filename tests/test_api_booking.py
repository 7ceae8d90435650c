from conftest import API, TODAY, TOMORROW, signup


async def book(client, headers, time, date=TOMORROW, provider_id="santi", service_ids=(1,)):
    return await client.post(
        f"{API}/appointments",
        headers=headers,
        json={
            "provider_id": provider_id,
            "date": date,
            "time": time,
            "service_ids": list(service_ids),
            "payment_method": "Transferencia Bancaria",
        },
    )


async def available(client, date=TOMORROW, provider_id="santi", **params):
    resp = await client.get(
        f"{API}/slots/available", params={"date": date, "provider_id": provider_id, **params}
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


async def test_catalog(client):
    providers = (await client.get(f"{API}/providers")).json()
    assert {p["id"]: p["slot_interval_minutes"] for p in providers} == {"santi": 30, "mili": 45}
    services = (await client.get(f"{API}/catalog/services")).json()
    assert [s["id"] for s in services] == [1, 2, 3, 4, 5, 6]
    methods = (await client.get(f"{API}/catalog/payment-methods")).json()
    assert methods == ["Transferencia Bancaria"]


class TestAvailableSlots:

    async def test_open_day(self, client):
        body = await available(client)
        assert body["date"] == TOMORROW
        assert len(body["slots"]) == 20
        assert body["slots"][0] == "10:00"
        assert body["slots"][-1] == "19:30"
        assert body["all_slots"] == body["slots"]
        assert body["fully_booked"] is False

    async def test_forty_five_minute_barber(self, client):
        body = await available(client, provider_id="mili")
        assert len(body["slots"]) == 14
        assert body["slots"][-1] == "19:45"

    async def test_today_hides_past_slots(self, client):
        body = await available(client, date=TODAY)
        assert body["slots"][0] == "15:00"
        assert len(body["slots"]) == 10
        assert len(body["all_slots"]) == 20

    async def test_past_day_is_fully_booked(self, client):
        body = await available(client, date="2026-03-09")
        assert body["slots"] == []
        assert body["fully_booked"] is True

    async def test_display_date_format_accepted(self, client):
        body = await available(client, date="11/03/2026")
        assert body["date"] == TOMORROW

    async def test_bad_date(self, client):
        resp = await client.get(f"{API}/slots/available", params={"date": "mañana", "provider_id": "santi"})
        assert resp.status_code == 422

    async def test_unknown_provider(self, client):
        resp = await client.get(f"{API}/slots/available", params={"date": TOMORROW, "provider_id": "nobody"})
        assert resp.status_code == 404

    async def test_service_minutes(self, client):
        body = await available(client, service_minutes=90)
        assert body["slots"][-1] == "18:30"


class TestBooking:

    async def test_book_slot(self, client, client_headers):
        resp = await book(client, client_headers, "10:00")
        assert resp.status_code == 201, resp.text
        body = resp.json()
        appointment = body["appointment"]
        assert appointment["time"] == "10:00"
        assert appointment["date"] == TOMORROW
        assert appointment["status"] == "pending"
        assert appointment["status_label"] == "Pendiente"
        assert appointment["client_name"] == "Juan Pérez"
        assert appointment["provider_name"] == "Santuu"
        assert appointment["total"] == 15500
        assert appointment["deposit_amount"] == 7750
        assert appointment["confirmation_number"].startswith("CONF-")
        notifications = body["notifications"]
        assert "TRIGGER:-PT2H" in notifications["ics"]
        assert notifications["reminder_at"] == "2026-03-11T08:00:00"

        slots = (await available(client))["slots"]
        assert "10:00" not in slots
        assert len(slots) == 19

    async def test_same_slot_twice_conflicts(self, client, client_headers):
        assert (await book(client, client_headers, "10:00")).status_code == 201
        other = await signup(client, "maria")
        resp = await book(client, other, "10:00")
        assert resp.status_code == 409

    async def test_other_barber_same_time_is_fine(self, client, client_headers):
        assert (await book(client, client_headers, "10:00")).status_code == 201
        assert (await book(client, client_headers, "10:00", provider_id="mili")).status_code == 201

    async def test_cancel_frees_slot(self, client, client_headers):
        appointment_id = (await book(client, client_headers, "12:30")).json()["appointment"]["id"]
        resp = await client.delete(f"{API}/appointments/{appointment_id}", headers=client_headers)
        assert resp.status_code == 204
        assert "12:30" in (await available(client))["slots"]
        assert (await book(client, client_headers, "12:30")).status_code == 201

    async def test_cannot_cancel_someone_elses(self, client, client_headers):
        appointment_id = (await book(client, client_headers, "12:30")).json()["appointment"]["id"]
        other = await signup(client, "maria")
        resp = await client.delete(f"{API}/appointments/{appointment_id}", headers=other)
        assert resp.status_code == 404

    async def test_past_slot_rejected(self, client, client_headers):
        assert (await book(client, client_headers, "14:30", date=TODAY)).status_code == 409
        assert (await book(client, client_headers, "15:00", date=TODAY)).status_code == 201

    async def test_off_grid_time_rejected(self, client, client_headers):
        assert (await book(client, client_headers, "10:15")).status_code == 409
        assert (await book(client, client_headers, "20:00")).status_code == 409

    async def test_unknown_provider(self, client, client_headers):
        assert (await book(client, client_headers, "10:00", provider_id="nobody")).status_code == 404

    async def test_unknown_service(self, client, client_headers):
        assert (await book(client, client_headers, "10:00", service_ids=(99,))).status_code == 422

    async def test_no_services(self, client, client_headers):
        assert (await book(client, client_headers, "10:00", service_ids=())).status_code == 422

    async def test_bad_date(self, client, client_headers):
        assert (await book(client, client_headers, "10:00", date="2026-13-45")).status_code == 422

    async def test_requires_login(self, client):
        assert (await book(client, {}, "10:00")).status_code == 401

    async def test_long_service_blocks_following_slots(self, client, client_headers):
        resp = await book(client, client_headers, "10:00", service_ids=(4,))
        assert resp.status_code == 201
        assert resp.json()["appointment"]["duration_minutes"] == 90
        assert resp.json()["appointment"]["deposit_amount"] == 0
        slots = (await available(client))["slots"]
        assert slots[0] == "11:30"
        assert (await book(client, client_headers, "10:30")).status_code == 409

    async def test_long_service_must_fit_before_closing(self, client, client_headers):
        assert (await book(client, client_headers, "19:00", service_ids=(4,))).status_code == 409

    async def test_list_my_appointments(self, client, client_headers):
        await book(client, client_headers, "11:00")
        await book(client, client_headers, "10:00")
        other = await signup(client, "maria")
        await book(client, other, "12:00")
        resp = await client.get(f"{API}/appointments", headers=client_headers)
        assert resp.status_code == 200
        assert [a["time"] for a in resp.json()] == ["10:00", "11:00"]
