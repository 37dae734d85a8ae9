"""Tests for the Person value embedded in clients and users."""

from datetime import date

import pytest

from app.domain.mappers import guest_client
from app.domain.models.client import Client
from app.domain.models.person import Person


class TestAge:

    @pytest.mark.parametrize(
        "born, on, expected",
        [
            (date(1990, 6, 15), date(2024, 6, 14), 33),
            (date(1990, 6, 15), date(2024, 6, 15), 34),
            (date(1990, 6, 15), date(2024, 12, 31), 34),
            (date(2000, 2, 29), date(2023, 2, 28), 22),
            (date(2000, 2, 29), date(2023, 3, 1), 23),
        ],
    )
    def test_calendar_age(self, born, on, expected):
        assert Person("Ana", "Gomez", "ana@example.com", born).age(on) == expected

    def test_unknown_birth_date(self):
        assert Person("Ana", "Gomez", "ana@example.com").age(date(2024, 1, 1)) is None


def test_full_name():
    assert Person("Ana", "Gomez", "a@b.co").full_name == "Ana Gomez"
    assert Person("Ana", "", "a@b.co").full_name == "Ana"


def test_client_embeds_person(db):
    client = Client(first_name="Ana", last_name="Gomez", email="ana@example.com", date_of_birth=date(1990, 1, 1))
    db.add(client)
    db.commit()

    db.expire_all()
    loaded = db.get(Client, client.id)
    assert loaded.person == Person("Ana", "Gomez", "ana@example.com", date(1990, 1, 1))
    assert loaded.full_name == "Ana Gomez"


def test_guest_client_splits_name():
    guest = guest_client("  Juan Carlos Ruiz ", "JUAN@Example.com")
    assert (guest.first_name, guest.last_name, guest.email) == ("Juan", "Carlos Ruiz", "juan@example.com")
