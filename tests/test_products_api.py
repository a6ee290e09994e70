import pytest


@pytest.fixture
def catalog(client):
    """Helmets > Full-face, plus Gloves, with one product in each."""

    def category(name, parent_id=None):
        return client.post("/categories", json={"name": name, "parent_id": parent_id}).json()

    def product(name, category_id, price, available=True):
        return client.post(
            "/products",
            json={
                "name": name,
                "price": price,
                "category_id": category_id,
                "available": available,
            },
        ).json()

    helmets = category("Helmets")
    full_face = category("Full-face", helmets["id"])
    gloves = category("Gloves")
    return {
        "helmets": helmets,
        "full_face": full_face,
        "gloves": gloves,
        "open_face": product("Open-face city", helmets["id"], 120.0),
        "carbon": product("Carbon race", full_face["id"], 480.0),
        "mitts": product("Winter mitts", gloves["id"], 45.0, available=False),
    }


def names(response):
    return [item["name"] for item in response.json()["items"]]


def test_list_all(client, catalog):
    response = client.get("/products")
    assert response.status_code == 200
    assert response.json()["total"] == 3
    assert names(response) == ["Carbon race", "Open-face city", "Winter mitts"]


def test_category_filter_direct_only(client, catalog):
    response = client.get("/products", params={"category_id": catalog["helmets"]["id"]})
    assert names(response) == ["Open-face city"]


def test_category_filter_with_subcategories(client, catalog):
    response = client.get(
        "/products",
        params={"category_id": catalog["helmets"]["id"], "include_subcategories": True},
    )
    assert names(response) == ["Carbon race", "Open-face city"]


def test_subcategory_filter_on_missing_category(client, catalog):
    response = client.get("/products", params={"category_id": 999, "include_subcategories": True})
    assert response.status_code == 404


def test_price_and_availability_filters(client, catalog):
    assert names(client.get("/products", params={"min_price": 100})) == [
        "Carbon race",
        "Open-face city",
    ]
    assert names(client.get("/products", params={"max_price": 50})) == ["Winter mitts"]
    assert names(client.get("/products", params={"available": False})) == ["Winter mitts"]
    assert names(client.get("/products", params={"search": "CITY"})) == ["Open-face city"]


def test_pagination(client, catalog):
    body = client.get("/products", params={"skip": 1, "limit": 1}).json()
    assert body["total"] == 3
    assert [item["name"] for item in body["items"]] == ["Open-face city"]


def test_get_includes_category_name(client, catalog):
    response = client.get(f"/products/{catalog['carbon']['id']}")
    assert response.status_code == 200
    assert response.json()["category_name"] == "Full-face"
    assert response.json()["price"] == 480.0


def test_get_missing(client):
    assert client.get("/products/12").status_code == 404


def test_create_with_unknown_category(client):
    response = client.post("/products", json={"name": "Ghost", "category_id": 31})
    assert response.status_code == 400


def test_update(client, catalog):
    product_id = catalog["mitts"]["id"]
    response = client.put(
        f"/products/{product_id}",
        json={"available": True, "category_id": catalog["helmets"]["id"]},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["available"] is True
    assert body["category_name"] == "Helmets"
    assert body["name"] == "Winter mitts"


def test_update_with_unknown_category(client, catalog):
    response = client.put(f"/products/{catalog['mitts']['id']}", json={"category_id": 31})
    assert response.status_code == 400


def test_delete_frees_the_category(client, catalog):
    gloves_id = catalog["gloves"]["id"]
    assert client.delete(f"/categories/{gloves_id}").status_code == 400

    assert client.delete(f"/products/{catalog['mitts']['id']}").status_code == 204
    assert client.get(f"/products/{catalog['mitts']['id']}").status_code == 404

    assert client.delete(f"/categories/{gloves_id}").status_code == 204
