"""
HTTP tests for the bookings and cash endpoints.
"""
import re

import pytest

from frontdesk.models import Booking, HousekeepingTask

from conftest import rooms_of


@pytest.fixture
def deluxe(make_category):
    return make_category(name="Deluxe", rooms=["101", "102"])


def book(client, **body):
    return client.post("/api/v1/bookings/book", json=body)


class TestHealth:
    def test_healthz(self, client):
        assert client.get("/healthz").json() == {"status": "ok"}


class TestBookEndpoint:
    def test_two_deluxe_rooms(self, client, db, deluxe):
        resp = book(client, categoryId=deluxe.id, count=2, guestDetails={"name": "Lena Fischer"})

        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert len(body["booked"]) == 2
        grcs = [b["grcNo"] for b in body["booked"]]
        assert len(set(grcs)) == 2
        for b in body["booked"]:
            assert re.fullmatch(r"GRC-\d{4}", b["grcNo"])
            assert b["isActive"] is True
            assert b["numberOfRooms"] == 1
            assert b["category"] == {"id": deluxe.id, "name": "Deluxe"}
            assert b["guestDetails"] == {"name": "Lena Fischer"}
        assert rooms_of(db, deluxe.id) == {"101": "booked", "102": "booked"}

    def test_batch(self, client, deluxe, make_category):
        suite = make_category(name="Suite", rooms=["201"])
        resp = client.post("/api/v1/bookings/book", json={"bookings": [
            {"categoryId": deluxe.id, "count": 1},
            {"categoryId": suite.id, "vip": True},
        ]})

        assert resp.status_code == 201
        booked = resp.json()["booked"]
        assert [b["category"]["name"] for b in booked] == ["Deluxe", "Suite"]
        assert booked[1]["vip"] is True

    def test_missing_category_id(self, client):
        resp = book(client, count=1)
        assert resp.status_code == 400
        assert resp.json() == {"error": "categoryId is required"}

    def test_unknown_category(self, client):
        resp = book(client, categoryId=999)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Category not found: 999"}

    def test_not_enough_rooms(self, client, db, deluxe):
        resp = book(client, categoryId=deluxe.id, count=3)

        assert resp.status_code == 400
        assert resp.json() == {"error": "Not enough available rooms in Deluxe"}
        assert db.query(Booking).count() == 0
        assert rooms_of(db, deluxe.id) == {"101": "available", "102": "available"}

    def test_malformed_body_is_400(self, client):
        resp = book(client, categoryId="not-a-number")
        assert resp.status_code == 400
        assert "error" in resp.json()


class TestReadEndpoints:
    @pytest.fixture
    def booked(self, client, deluxe):
        return book(client, categoryId=deluxe.id, count=2).json()["booked"]

    def test_by_id_and_grc(self, client, booked):
        first = booked[0]
        by_id = client.get(f"/api/v1/bookings/{first['id']}").json()
        by_grc = client.get(f"/api/v1/bookings/grc/{first['grcNo']}").json()

        assert by_id["success"] is True
        assert by_id["booking"]["grcNo"] == first["grcNo"]
        assert by_grc["booking"]["id"] == first["id"]

    def test_not_found(self, client):
        assert client.get("/api/v1/bookings/404").status_code == 404
        resp = client.get("/api/v1/bookings/grc/GRC-0000")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Booking not found with given GRC"}

    def test_all_and_category(self, client, booked, deluxe):
        client.delete(f"/api/v1/bookings/unbook/{booked[0]['id']}")

        active = client.get("/api/v1/bookings/all").json()
        everything = client.get("/api/v1/bookings/all", params={"all": "true"}).json()
        by_category = client.get(f"/api/v1/bookings/category/{deluxe.id}").json()

        assert [b["id"] for b in active] == [booked[1]["id"]]
        assert len(everything) == 2
        assert len(by_category) == 2

    def test_orphaned_category_shows_unknown(self, client, db, booked):
        db.expire_all()
        booking = db.get(Booking, booked[0]["id"])
        booking.category_id = 999
        db.commit()

        body = client.get(f"/api/v1/bookings/{booked[0]['id']}").json()

        assert body["booking"]["category"] == {"id": None, "name": "Unknown"}


class TestLifecycleEndpoints:
    @pytest.fixture
    def booking(self, client, deluxe):
        return book(
            client,
            categoryId=deluxe.id,
            bookingInfo={"checkIn": "2026-10-19T14:00:00", "checkOut": "2026-10-21T11:00:00"},
            paymentDetails={"totalAmount": 800},
        ).json()["booked"][0]

    def test_extend(self, client, booking):
        resp = client.post(f"/api/v1/bookings/extend/{booking['id']}", json={
            "extendedCheckOut": "2026-10-23T11:00:00", "additionalAmount": 200, "reason": "stay over",
        })

        assert resp.status_code == 200
        extended = resp.json()["booking"]
        assert extended["paymentDetails"]["totalAmount"] == 1000
        assert extended["bookingInfo"]["checkOut"] == "2026-10-23T11:00:00"
        [record] = extended["extensionHistory"]
        assert record["extendedCheckOut"] == "2026-10-23T11:00:00"
        assert record["originalCheckOut"] == "2026-10-21T11:00:00"
        assert record["additionalAmount"] == 200

    def test_extend_inactive_is_400(self, client, booking):
        client.delete(f"/api/v1/bookings/unbook/{booking['id']}")
        resp = client.post(f"/api/v1/bookings/extend/{booking['id']}", json={"extendedCheckOut": "2026-10-23T11:00:00"})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Cannot extend inactive booking"}

    def test_extend_unknown_is_404(self, client):
        resp = client.post("/api/v1/bookings/extend/999", json={"extendedCheckOut": "2026-10-23T11:00:00"})
        assert resp.status_code == 404

    def test_update(self, client, booking):
        resp = client.put(f"/api/v1/bookings/update/{booking['id']}", json={
            "grcNo": "GRC-0001",
            "contactDetails": {"email": "guest@example.com"},
            "vip": True,
        })

        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Booking updated successfully"
        assert body["booking"]["grcNo"] == booking["grcNo"]
        assert body["booking"]["contactDetails"] == {"email": "guest@example.com"}
        assert body["booking"]["vip"] is True

    def test_update_unknown_is_404(self, client):
        assert client.put("/api/v1/bookings/update/999", json={"vip": True}).status_code == 404

    @pytest.mark.parametrize("body, message", [
        ({"numberOfRooms": "two"}, "numberOfRooms must be a positive integer"),
        ({"numberOfRooms": [1]}, "numberOfRooms must be a positive integer"),
        ({"vip": "maybe"}, "vip must be true or false"),
    ])
    def test_update_bad_scalar_is_400_json(self, client, booking, body, message):
        resp = client.put(f"/api/v1/bookings/update/{booking['id']}", json=body)

        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith("application/json")
        assert resp.json() == {"error": message}

    def test_update_vip_false_string(self, client, booking):
        client.put(f"/api/v1/bookings/update/{booking['id']}", json={"vip": True})
        resp = client.put(f"/api/v1/bookings/update/{booking['id']}", json={"vip": "false"})

        assert resp.status_code == 200
        assert resp.json()["booking"]["vip"] is False

    def test_unbook_twice(self, client, db, booking, deluxe):
        first = client.delete(f"/api/v1/bookings/unbook/{booking['id']}")
        second = client.delete(f"/api/v1/bookings/unbook/{booking['id']}")

        assert first.status_code == second.status_code == 200
        assert first.json()["message"] == "Room set to maintenance status. Housekeeping task created."
        assert second.json()["success"] is True
        assert rooms_of(db, deluxe.id)[booking["roomNumber"]] == "maintenance"
        assert db.query(HousekeepingTask).count() == 1

    def test_unbook_without_matching_room(self, client, db, booking, deluxe):
        client.put(f"/api/v1/bookings/update/{booking['id']}", json={"roomNumber": "X-9"})

        resp = client.delete(f"/api/v1/bookings/unbook/{booking['id']}")

        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert rooms_of(db, deluxe.id)[booking["roomNumber"]] == "booked"
        assert db.query(HousekeepingTask).count() == 0

    def test_unbook_unknown_is_404(self, client):
        assert client.delete("/api/v1/bookings/unbook/999").status_code == 404

    def test_permanent_delete(self, client, booking):
        resp = client.delete(f"/api/v1/bookings/delete/{booking['id']}")
        assert resp.json() == {"success": True, "message": "Booking permanently deleted"}
        assert client.get(f"/api/v1/bookings/{booking['id']}").status_code == 404
        assert client.delete(f"/api/v1/bookings/delete/{booking['id']}").status_code == 404


class TestCashEndpoints:
    def test_keep_500_shows_in_today_report(self, client):
        before = client.get("/api/v1/cash/report", params={"filter": "today"}).json()["cards"]["RESTAURANT"]["summary"]

        resp = client.post("/api/v1/cash/transactions", json={"amount": 500, "type": "KEEP", "source": "RESTAURANT"})
        assert resp.status_code == 201
        assert resp.json()["transaction"]["source"] == "RESTAURANT"

        report = client.get("/api/v1/cash/report", params={"filter": "today"}).json()
        after = report["cards"]["RESTAURANT"]["summary"]
        assert report["filterApplied"] == "today"
        assert after["totalReceived"] >= 500
        assert after["totalSent"] == before["totalSent"]
        assert after["cashInReception"] == before["cashInReception"] + 500

    def test_invalid_transaction(self, client):
        resp = client.post("/api/v1/cash/transactions", json={"amount": -1, "type": "KEEP", "source": "OTHER"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Amount must be a positive number"}

    def test_list_transactions(self, client):
        for amount in (10, 20, 30):
            client.post("/api/v1/cash/transactions", json={"amount": amount, "type": "SENT", "source": "OTHER"})

        body = client.get("/api/v1/cash/transactions", params={"limit": 2}).json()

        assert body["pagination"] == {"page": 1, "limit": 2, "totalPages": 2, "totalTransactions": 3}
        assert len(body["transactions"]) == 2

    def test_invalid_date(self, client):
        resp = client.get("/api/v1/cash/report", params={"filter": "date", "date": "yesterday-ish"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid date format"}

    def test_bad_page_is_400(self, client):
        assert client.get("/api/v1/cash/transactions", params={"page": 0}).status_code == 400

    def test_export_csv(self, client):
        client.post("/api/v1/cash/transactions", json={"amount": 40, "type": "KEEP", "source": "banquet + party"})

        resp = client.get("/api/v1/cash/report/export", params={"format": "csv"})

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "BANQUET+PARTY,40.00,0.00,40.00,1" in resp.text

    def test_export_pdf(self, client):
        resp = client.get("/api/v1/cash/report/export", params={"format": "pdf", "filter": "month"})
        assert resp.status_code == 200
        assert resp.content.startswith(b"%PDF")

    def test_export_unknown_format(self, client):
        assert client.get("/api/v1/cash/report/export", params={"format": "xlsx"}).status_code == 400
