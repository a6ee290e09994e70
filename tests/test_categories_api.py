from motoshop.models.category import Category


def create(client, name, parent_id=None, **fields):
    response = client.post("/categories", json={"name": name, "parent_id": parent_id, **fields})
    assert response.status_code == 201, response.text
    return response.json()


def add_product(client, category_id, name="Item"):
    response = client.post(
        "/products", json={"name": name, "price": 99.5, "category_id": category_id}
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_requires_api_key(client):
    response = client.get("/categories", headers={"X-API-Key": ""})
    assert response.status_code == 401

    response = client.get("/categories", headers={"X-API-Key": "wrong"})
    assert response.status_code == 401


def test_health_needs_no_key(client):
    response = client.get("/health", headers={"X-API-Key": ""})
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_and_get(client):
    helmets = create(client, "Helmets", description="Head protection")

    response = client.get(f"/categories/{helmets['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Helmets"
    assert body["parent_id"] is None
    assert body["active"] is True


def test_create_blank_name_is_unprocessable(client):
    response = client.post("/categories", json={"name": "   "})
    assert response.status_code == 422


def test_create_under_missing_parent(client):
    response = client.post("/categories", json={"name": "Orphan", "parent_id": 77})
    assert response.status_code == 404
    assert "77" in response.json()["detail"]


def test_get_missing_category(client):
    assert client.get("/categories/5").status_code == 404


def test_path_and_stats(client):
    helmets = create(client, "Helmets")
    full_face = create(client, "Full-face", helmets["id"])
    add_product(client, full_face["id"])
    add_product(client, full_face["id"], name="Second")

    path = client.get(f"/categories/{full_face['id']}/path").json()
    assert [c["name"] for c in path] == ["Helmets", "Full-face"]

    stats = client.get(f"/categories/{helmets['id']}/stats").json()
    assert stats == {
        "category_id": helmets["id"],
        "level": 0,
        "direct_product_count": 0,
        "total_product_count": 2,
        "has_products": False,
        "has_subcategories": True,
    }


def test_tree_and_lists(client):
    helmets = create(client, "Helmets", sort_order=10)
    gloves = create(client, "Gloves", sort_order=20)
    full_face = create(client, "Full-face", helmets["id"])

    tree = client.get("/categories/tree").json()
    assert [node["id"] for node in tree] == [helmets["id"], gloves["id"]]
    assert [child["id"] for child in tree[0]["children"]] == [full_face["id"]]
    assert tree[0]["children"][0]["children"] == []

    roots = client.get("/categories/roots").json()
    assert [c["id"] for c in roots] == [helmets["id"], gloves["id"]]

    leaves = client.get("/categories/leaves").json()
    assert sorted(c["id"] for c in leaves) == sorted([gloves["id"], full_face["id"]])

    children = client.get(f"/categories/{helmets['id']}/children").json()
    assert [c["id"] for c in children] == [full_face["id"]]

    found = client.get("/categories", params={"search": "glo"}).json()
    assert [c["id"] for c in found] == [gloves["id"]]


def test_update_cycle_is_bad_request(client):
    helmets = create(client, "Helmets")
    full_face = create(client, "Full-face", helmets["id"])

    response = client.put(f"/categories/{helmets['id']}", json={"parent_id": full_face["id"]})

    assert response.status_code == 400
    assert response.json()["detail"] == "circular dependency"


def test_update_null_parent_moves_to_root(client):
    helmets = create(client, "Helmets")
    full_face = create(client, "Full-face", helmets["id"])

    response = client.put(f"/categories/{full_face['id']}", json={"parent_id": None})

    assert response.status_code == 200
    assert response.json()["parent_id"] is None


def test_update_without_parent_keeps_it(client):
    helmets = create(client, "Helmets")
    full_face = create(client, "Full-face", helmets["id"])

    response = client.put(f"/categories/{full_face['id']}", json={"name": "Full face"})

    assert response.status_code == 200
    assert response.json()["parent_id"] == helmets["id"]
    assert response.json()["name"] == "Full face"


def test_move(client):
    helmets = create(client, "Helmets")
    gloves = create(client, "Gloves")

    response = client.post(f"/categories/{gloves['id']}/move", json={"parent_id": helmets["id"]})
    assert response.status_code == 200
    assert response.json()["parent_id"] == helmets["id"]

    response = client.post(f"/categories/{helmets['id']}/move", json={"parent_id": gloves["id"]})
    assert response.status_code == 400

    response = client.post(f"/categories/{gloves['id']}/move", json={"parent_id": 404})
    assert response.status_code == 404


def test_valid_parent_check(client):
    helmets = create(client, "Helmets")
    full_face = create(client, "Full-face", helmets["id"])

    response = client.get(f"/categories/{helmets['id']}/valid-parent/{full_face['id']}")
    assert response.json() == {
        "category_id": helmets["id"],
        "parent_id": full_face["id"],
        "valid": False,
    }

    response = client.get(f"/categories/{full_face['id']}/valid-parent/{helmets['id']}")
    assert response.json()["valid"] is True


def test_delete_reparents_children(client):
    helmets = create(client, "Helmets")
    full_face = create(client, "Full-face", helmets["id"])

    response = client.delete(f"/categories/{helmets['id']}")

    assert response.status_code == 204
    assert client.get(f"/categories/{helmets['id']}").status_code == 404
    tree = client.get("/categories/tree").json()
    assert [node["id"] for node in tree] == [full_face["id"]]


def test_delete_with_products_is_rejected(client):
    helmets = create(client, "Helmets")
    add_product(client, helmets["id"])

    response = client.delete(f"/categories/{helmets['id']}")

    assert response.status_code == 400
    assert response.json()["detail"] == "category has products"
    assert client.get(f"/categories/{helmets['id']}").status_code == 200


def test_delete_missing(client):
    assert client.delete("/categories/3").status_code == 404


def test_product_counts_and_with_products(client):
    helmets = create(client, "Helmets")
    full_face = create(client, "Full-face", helmets["id"])
    gloves = create(client, "Gloves")
    add_product(client, full_face["id"])

    counts = client.get("/categories/product-counts").json()
    assert counts == {str(helmets["id"]): 1, str(full_face["id"]): 1, str(gloves["id"]): 0}

    with_products = client.get("/categories/with-products").json()
    assert [c["id"] for c in with_products] == [full_face["id"]]


def test_corrupted_hierarchy(client, session_factory):
    a = create(client, "A")
    b = create(client, "B", a["id"])
    db = session_factory()
    db.get(Category, a["id"]).parent_id = b["id"]
    db.commit()
    db.close()

    assert client.get(f"/categories/{b['id']}/path").status_code == 500
    assert client.get("/categories/product-counts").status_code == 500

    report = client.get("/categories/integrity").json()
    assert report["ok"] is False
    assert report["cyclic_ids"] == sorted([a["id"], b["id"]])


def test_blank_and_null_names_on_update(client):
    helmets = create(client, "Helmets")

    assert client.put(f"/categories/{helmets['id']}", json={"name": "  "}).status_code == 422

    response = client.put(f"/categories/{helmets['id']}", json={"name": None})
    assert response.status_code == 400
    assert response.json()["detail"] == "category name must not be empty"
