"""
Tests for room allocation.
"""
import pytest
from sqlalchemy import update

from frontdesk.errors import AllocationError, CategoryNotFound, InsufficientAvailability
from frontdesk.models import Room
from frontdesk.services import allocation
from frontdesk.services.allocation import allocate_rooms

from conftest import rooms_of


class TestAllocateRooms:
    def test_claims_requested_rooms(self, db, make_category):
        category = make_category(rooms=["101", "102", "103"])

        _, rooms = allocate_rooms(db, category.id, 2)
        db.commit()

        assert [r.room_number for r in rooms] == ["101", "102"]
        assert rooms_of(db, category.id) == {"101": "booked", "102": "booked", "103": "available"}

    def test_only_available_rooms_are_considered(self, db, make_category):
        category = make_category(rooms=["101"], status="maintenance")
        db.add(Room(room_number="102", category_id=category.id, status="available"))
        db.commit()

        _, rooms = allocate_rooms(db, category.id, 1)

        assert [r.room_number for r in rooms] == ["102"]

    def test_unknown_category(self, db):
        with pytest.raises(CategoryNotFound) as exc:
            allocate_rooms(db, 999, 1)
        assert isinstance(exc.value, AllocationError)
        assert "999" in exc.value.message

    def test_insufficient_rooms_mutates_nothing(self, db, make_category):
        category = make_category(name="Suite", rooms=["201"])

        with pytest.raises(InsufficientAvailability) as exc:
            allocate_rooms(db, category.id, 2)

        assert exc.value.message == "Not enough available rooms in Suite"
        assert rooms_of(db, category.id) == {"201": "available"}

    def test_room_taken_concurrently_is_replaced(self, db, make_category, monkeypatch):
        category = make_category(rooms=["101", "102", "103"])
        real_claim = allocation._claim
        raced = []

        def racing_claim(session, room):
            if not raced:
                # Another writer books the room between our select and our claim
                raced.append(room.room_number)
                session.execute(update(Room).where(Room.id == room.id).values(status="booked"))
            return real_claim(session, room)

        monkeypatch.setattr(allocation, "_claim", racing_claim)

        _, rooms = allocate_rooms(db, category.id, 2)

        assert raced == ["101"]
        assert [r.room_number for r in rooms] == ["102", "103"]

    def test_lost_race_without_spare_rooms_rolls_back(self, db, make_category, monkeypatch):
        category = make_category(rooms=["101", "102"])
        real_claim = allocation._claim

        def racing_claim(session, room):
            if room.room_number == "101":
                session.execute(update(Room).where(Room.id == room.id).values(status="booked"))
            return real_claim(session, room)

        monkeypatch.setattr(allocation, "_claim", racing_claim)

        with pytest.raises(InsufficientAvailability):
            allocate_rooms(db, category.id, 2)

        # Room 102 was claimed before the failure and must not stay booked
        assert rooms_of(db, category.id)["102"] == "available"
