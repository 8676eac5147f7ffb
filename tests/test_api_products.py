import pytest

from database.models import RoleName


MANAGE = "/manage-product/products"


def product_payload(**overrides):
    payload = {
        "name": "T-shirt",
        "base_price": 10,
        "virtual_price": 12,
        "images": ["https://cdn.example.com/t-shirt.png"],
        "published_at": "2020-01-01T00:00:00Z",
        "variants": [
            {"value": "Color", "options": ["Red", "Blue"]},
            {"value": "Size", "options": ["S", "M"]},
        ],
        "skus": [
            {"value": value, "price": 10, "stock": 5}
            for value in ["Red-S", "Red-M", "Blue-S", "Blue-M"]
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def seller(login_as):
    headers, user = login_as(RoleName.SELLER)
    return headers, user


@pytest.fixture
def product(client, seller):
    headers, _ = seller
    response = client.post(MANAGE, json=product_payload(), headers=headers)
    assert response.status_code == 201
    return response.json()


class TestCreate:
    def test_seller_creates_product_with_skus(self, client, seller, product):
        _, user = seller

        assert product["created_by_id"] == user.id
        assert sorted(sku["value"] for sku in product["skus"]) == ["Blue-M", "Blue-S", "Red-M", "Red-S"]
        assert product["variants"][0] == {"value": "Color", "options": ["Red", "Blue"]}

    def test_client_cannot_create(self, client, login_as):
        headers, _ = login_as(RoleName.CLIENT)

        assert client.post(MANAGE, json=product_payload(), headers=headers).status_code == 403

    def test_unknown_sku_is_field_error(self, client, seller):
        headers, _ = seller
        skus = product_payload()["skus"]
        skus[3]["value"] = "Red-L"

        response = client.post(MANAGE, json=product_payload(skus=skus), headers=headers)

        assert response.status_code == 422
        assert response.json() == {
            "message": "Validation failed.",
            "errors": [{"field": "skus", "message": 'SKU "red-l" is not valid.'}],
        }

    def test_missing_sku_reports_counts(self, client, seller):
        headers, _ = seller
        skus = product_payload()["skus"][:3]

        response = client.post(MANAGE, json=product_payload(skus=skus), headers=headers)

        assert response.status_code == 422
        assert response.json()["errors"][0]["message"] == (
            "The number of SKUs (3) does not match the 4 SKUs generated from the variants."
        )

    def test_duplicate_variant_names(self, client, seller):
        headers, _ = seller
        variants = [
            {"value": "Color", "options": ["Red"]},
            {"value": "color", "options": ["Blue"]},
        ]

        response = client.post(MANAGE, json=product_payload(variants=variants), headers=headers)

        assert response.status_code == 422
        assert [error["field"] for error in response.json()["errors"]] == ["variants"]

    def test_plain_field_errors_use_field_names(self, client, seller):
        headers, _ = seller
        payload = product_payload()
        del payload["name"]

        response = client.post(MANAGE, json=payload, headers=headers)

        assert response.status_code == 422
        assert "name" in [error["field"] for error in response.json()["errors"]]

    @pytest.mark.parametrize("options", [[], ["Red", ""], ["Red", "   "]])
    def test_empty_or_blank_options_are_rejected(self, client, seller, options):
        headers, _ = seller
        variants = [{"value": "Color", "options": options}]
        skus = [{"value": "Red", "price": 1, "stock": 1}]

        response = client.post(MANAGE, json=product_payload(variants=variants, skus=skus), headers=headers)

        assert response.status_code == 422
        assert all(error["field"].startswith("variants.0.options") for error in response.json()["errors"])

    def test_variant_text_is_stripped(self, client, seller):
        headers, _ = seller
        variants = [
            {"value": " Color ", "options": [" Red ", "Blue"]},
            {"value": "Size", "options": ["S", "M "]},
        ]

        response = client.post(MANAGE, json=product_payload(variants=variants), headers=headers)

        assert response.status_code == 201
        assert response.json()["variants"] == [
            {"value": "Color", "options": ["Red", "Blue"]},
            {"value": "Size", "options": ["S", "M"]},
        ]


class TestCatalogReferences:
    def test_existing_brand_and_categories_are_accepted(self, client, admin_headers, seller):
        headers, _ = seller
        brand = client.post("/brands", json={"name": "Acme", "logo": "https://cdn.example.com/acme.png"}, headers=admin_headers).json()
        category = client.post("/categories", json={"name": "Shirts"}, headers=admin_headers).json()

        response = client.post(
            MANAGE,
            json=product_payload(brand_id=brand["id"], category_ids=[category["id"]]),
            headers=headers,
        )

        assert response.status_code == 201
        assert response.json()["brand_id"] == brand["id"]
        assert response.json()["category_ids"] == [category["id"]]

    def test_unknown_brand_is_rejected(self, client, seller):
        headers, _ = seller

        response = client.post(MANAGE, json=product_payload(brand_id="missing"), headers=headers)

        assert response.status_code == 422
        assert response.json()["detail"] == "Brand not found."

    def test_deleted_brand_is_rejected_on_update(self, client, admin_headers, seller, product):
        headers, _ = seller
        brand = client.post("/brands", json={"name": "Acme", "logo": "https://cdn.example.com/acme.png"}, headers=admin_headers).json()
        client.delete(f"/brands/{brand['id']}", headers=admin_headers)

        payload = {"brand_id": brand["id"], "variants": product_payload()["variants"], "skus": product_payload()["skus"]}
        response = client.put(f"{MANAGE}/{product['id']}", json=payload, headers=headers)

        assert response.status_code == 422
        assert response.json()["detail"] == "Brand not found."

    def test_unknown_categories_are_listed(self, client, admin_headers, seller):
        headers, _ = seller
        category = client.post("/categories", json={"name": "Shirts"}, headers=admin_headers).json()

        response = client.post(
            MANAGE,
            json=product_payload(category_ids=[category["id"], "nope", "gone"]),
            headers=headers,
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "Categories not found: nope, gone."


class TestPublicCatalogue:
    def test_published_product_is_listed(self, client, product):
        response = client.get("/products")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["products"]] == [product["id"]]

        detail = client.get(f"/products/{product['id']}")
        assert detail.status_code == 200
        assert len(detail.json()["skus"]) == 4

    def test_unpublished_product_is_hidden(self, client, seller):
        headers, _ = seller
        response = client.post(MANAGE, json=product_payload(published_at=None), headers=headers)
        product_id = response.json()["id"]

        assert client.get("/products").json()["total"] == 0
        assert client.get(f"/products/{product_id}").status_code == 404
        assert client.get(f"{MANAGE}/{product_id}", headers=headers).status_code == 200


class TestUpdate:
    def test_replaces_sku_set(self, client, seller, product):
        headers, _ = seller
        payload = product_payload(
            variants=[{"value": "Color", "options": ["Red", "Green"]}],
            skus=[
                {"value": "Red", "price": 11, "stock": 1},
                {"value": "Green", "price": 12, "stock": 2},
            ],
        )

        response = client.put(f"{MANAGE}/{product['id']}", json=payload, headers=headers)

        assert response.status_code == 200
        assert sorted(sku["value"] for sku in response.json()["skus"]) == ["Green", "Red"]

    def test_existing_skus_are_updated_in_place(self, client, seller, product):
        headers, _ = seller
        skus = product_payload()["skus"]
        skus[0]["price"] = 99

        response = client.put(
            f"{MANAGE}/{product['id']}",
            json={"variants": product_payload()["variants"], "skus": skus},
            headers=headers,
        )

        assert response.status_code == 200
        updated = {sku["value"]: sku for sku in response.json()["skus"]}
        original = {sku["value"]: sku for sku in product["skus"]}
        assert updated["Red-S"]["id"] == original["Red-S"]["id"]
        assert updated["Red-S"]["price"] == 99
        assert response.json()["name"] == "T-shirt"

    def test_invalid_skus_rejected(self, client, seller, product):
        headers, _ = seller
        payload = {"variants": product_payload()["variants"], "skus": product_payload()["skus"][:1]}

        response = client.put(f"{MANAGE}/{product['id']}", json=payload, headers=headers)

        assert response.status_code == 422


class TestOwnership:
    def test_other_seller_is_refused(self, client, login_as, product):
        headers, _ = login_as(RoleName.SELLER)
        url = f"{MANAGE}/{product['id']}"

        for response in (
            client.get(url, headers=headers),
            client.put(url, json=product_payload(), headers=headers),
            client.delete(url, headers=headers),
        ):
            assert response.status_code == 403
            assert response.json()["detail"] == "You do not have permission to interact with this product."

    def test_listing_is_scoped_to_own_products(self, client, login_as, seller, product):
        other_headers, _ = login_as(RoleName.SELLER)
        _, owner = seller

        assert client.get(MANAGE, headers=other_headers).json()["total"] == 0
        response = client.get(MANAGE, params={"created_by_id": owner.id}, headers=other_headers)
        assert response.status_code == 403

    def test_admin_manages_any_product(self, client, admin_headers, product):
        response = client.get(f"{MANAGE}/{product['id']}", headers=admin_headers)
        assert response.status_code == 200

        assert client.get(MANAGE, headers=admin_headers).json()["total"] == 1


def test_delete_hides_product(client, seller, product):
    headers, _ = seller

    response = client.delete(f"{MANAGE}/{product['id']}", headers=headers)

    assert response.status_code == 204
    assert client.get(f"/products/{product['id']}").status_code == 404
    assert client.get(f"{MANAGE}/{product['id']}", headers=headers).status_code == 404
