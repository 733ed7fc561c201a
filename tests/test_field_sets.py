import pytest

from addresses.models import Address
from backend.exceptions import InvalidRequest, NotFound
from backend.field_sets import FieldSet

ADDRESS = FieldSet("street", "city", "zip_code")


def test_build_keeps_declared_order():
    updates = ADDRESS.build({"zip_code": "10001", "street": "5th Ave", "city": "NYC"})
    assert list(updates) == ["street", "city", "zip_code"]


def test_build_drops_unknown_fields():
    updates = ADDRESS.build({"city": "Paris", "user_id": 99, "is_admin": True})
    assert updates == {"city": "Paris"}


def test_build_rejects_empty_update():
    with pytest.raises(InvalidRequest):
        ADDRESS.build({"user_id": 5})


@pytest.mark.django_db
def test_apply_writes_fields_and_extras(user, make_address):
    address = make_address(user, street="Old Rd", city="Oldtown")

    updates = ADDRESS.apply(
        Address.objects.filter(pk=address.pk), {"city": "Newtown"}, country="FR"
    )

    assert updates == {"city": "Newtown", "country": "FR"}
    address.refresh_from_db()
    assert (address.street, address.city, address.country) == ("Old Rd", "Newtown", "FR")


@pytest.mark.django_db
def test_apply_raises_when_nothing_matched():
    with pytest.raises(NotFound):
        ADDRESS.apply(Address.objects.filter(pk=-1), {"city": "Nowhere"})
