import pytest

from addresses.models import Address

ADDRESS_PAYLOAD = {
    "street": "10 Downing St",
    "city": "London",
    "state": "Greater London",
    "zip_code": "SW1A 2AA",
    "country": "UK",
    "is_billing": True,
    "is_shipping": False,
}


@pytest.mark.django_db
class TestAddresses:
    def test_create_and_list_own(self, client_for, user, other_user, make_address):
        make_address(other_user)
        client = client_for(user)

        created = client.post("/addresses/", ADDRESS_PAYLOAD, format="json")
        listing = client.get("/addresses/")

        assert created.status_code == 201
        assert created.data["address"]["user_id"] == user.id
        assert [a["id"] for a in listing.data] == [created.data["address"]["id"]]

    def test_usage_flags_required(self, client_for, user):
        payload = {k: v for k, v in ADDRESS_PAYLOAD.items() if k != "is_shipping"}
        response = client_for(user).post("/addresses/", payload, format="json")
        assert response.status_code == 400
        assert "is_shipping" in response.data["errors"]

    def test_partial_update(self, client_for, user, make_address):
        address = make_address(user, city="Leeds")

        response = client_for(user).patch(
            f"/addresses/{address.id}/", {"city": "York", "is_shipping": False}, format="json"
        )

        assert response.status_code == 200
        address.refresh_from_db()
        assert address.city == "York"
        assert address.is_shipping is False
        assert address.street == "1 Market St"

    def test_empty_update(self, client_for, user, make_address):
        address = make_address(user)
        response = client_for(user).patch(f"/addresses/{address.id}/", {}, format="json")
        assert response.status_code == 400

    def test_other_users_address_is_hidden(self, client_for, user, other_user, make_address):
        address = make_address(other_user)
        client = client_for(user)

        assert client.get(f"/addresses/{address.id}/").status_code == 404
        assert client.patch(
            f"/addresses/{address.id}/", {"city": "Hijacked"}, format="json"
        ).status_code == 404
        assert client.delete(f"/addresses/{address.id}/").status_code == 404
        address.refresh_from_db()
        assert address.city == "Springfield"

    def test_delete(self, client_for, user, make_address):
        address = make_address(user)
        response = client_for(user).delete(f"/addresses/{address.id}/")
        assert response.status_code == 200
        assert not Address.objects.filter(pk=address.id).exists()

    def test_address_on_an_order_cannot_be_deleted(
        self, client_for, user, make_product, place_order
    ):
        place_order(user, [(make_product(), 1)])
        address = Address.objects.get(user=user)

        response = client_for(user).delete(f"/addresses/{address.id}/")

        assert response.status_code == 409
        assert Address.objects.filter(pk=address.id).exists()
