"""HTTP tests for the product catalogue."""

NEW_PRODUCT = {
    "name": "Organic Bananas",
    "description": "A bunch of six ripe bananas",
    "price": 2.49,
    "category": "Fruits",
    "inStock": 40,
}


class TestProductAdmin:
    def test_create(self, client, admin, auth_headers):
        response = client.post("/api/products", json=NEW_PRODUCT, headers=auth_headers(admin))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Organic Bananas"
        assert data["inStock"] == 40
        assert data["totalSold"] == 0
        assert data["averageRating"] == 0.0

    def test_customers_cannot_create(self, client, customer, auth_headers):
        response = client.post("/api/products", json=NEW_PRODUCT, headers=auth_headers(customer))
        assert response.status_code == 403

    def test_price_must_be_positive(self, client, admin, auth_headers):
        response = client.post("/api/products", json={**NEW_PRODUCT, "price": 0}, headers=auth_headers(admin))

        assert response.status_code == 400
        assert "price" in response.json()["message"]

    def test_update(self, client, admin, auth_headers, make_product):
        product = make_product(price=3.0)

        response = client.put(f"/api/products/{product.id}", json={"price": 3.5}, headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json()["data"]["price"] == 3.5
        assert response.json()["data"]["name"] == product.name

    def test_restock_adds(self, client, admin, auth_headers, make_product):
        product = make_product(in_stock=5)

        response = client.put(
            f"/api/products/{product.id}/restock",
            json={"quantity": 10, "mode": "add"},
            headers=auth_headers(admin),
        )

        assert response.json()["data"]["inStock"] == 15

    def test_delete(self, client, admin, auth_headers, make_product):
        product = make_product()

        response = client.delete(f"/api/products/{product.id}", headers=auth_headers(admin))
        assert response.json() == {"success": True, "message": "Product deleted", "data": None}
        assert client.get(f"/api/products/{product.id}").status_code == 404


class TestProductBrowsing:
    def test_list_is_public_and_paginated(self, client, make_product):
        for _ in range(3):
            make_product()

        response = client.get("/api/products", params={"size": "2"})

        data = response.json()["data"]
        assert len(data["products"]) == 2
        assert data["pagination"]["total"] == 3
        assert data["pagination"]["totalPages"] == 2

    def test_search(self, client, make_product):
        make_product(name="Greek Yogurt", category="Dairy")
        make_product(name="Apple")

        response = client.get("/api/products", params={"search": "yog"})
        assert [p["name"] for p in response.json()["data"]["products"]] == ["Greek Yogurt"]

    def test_by_category(self, client, make_product):
        make_product(name="Milk", category="Dairy")
        make_product(name="Apple", category="Fruits")

        response = client.get("/api/products/category/Dairy")
        assert [p["name"] for p in response.json()["data"]] == ["Milk"]

    def test_out_of_stock(self, client, make_product):
        make_product(name="Gone", in_stock=0)
        make_product(name="Plenty", in_stock=9)

        response = client.get("/api/products/out-of-stock")
        assert [p["name"] for p in response.json()["data"]["products"]] == ["Gone"]

    def test_unknown_product(self, client):
        response = client.get("/api/products/missing")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Product not found"}


class TestEngagement:
    def test_view_counter(self, client, make_product):
        product = make_product()

        client.patch(f"/api/products/{product.id}/view")
        response = client.patch(f"/api/products/{product.id}/view")

        assert response.json()["data"]["viewCount"] == 2

    def test_rating_needs_a_user(self, client, make_product):
        response = client.post(f"/api/products/{make_product().id}/rate", json={"rating": 4})
        assert response.status_code == 401

    def test_rating_updates_the_average(self, client, customer, make_user, auth_headers, make_product):
        product = make_product()

        client.post(f"/api/products/{product.id}/rate", json={"rating": 5}, headers=auth_headers(customer))
        response = client.post(f"/api/products/{product.id}/rate", json={"rating": 2}, headers=auth_headers(make_user()))

        data = response.json()["data"]
        assert data["averageRating"] == 3.5
        assert data["reviewCount"] == 2

    def test_rating_out_of_range(self, client, customer, auth_headers, make_product):
        response = client.post(
            f"/api/products/{make_product().id}/rate", json={"rating": 6}, headers=auth_headers(customer)
        )
        assert response.status_code == 400

    def test_favorite_toggles(self, client, customer, auth_headers, make_product):
        product = make_product()
        headers = auth_headers(customer)

        first = client.post(f"/api/products/{product.id}/favorite", headers=headers)
        assert first.json()["message"] == "Added to favorites"
        assert [p["id"] for p in client.get("/api/products/favorites/me", headers=headers).json()["data"]] == [product.id]

        second = client.post(f"/api/products/{product.id}/favorite", headers=headers)
        assert second.json()["data"] == {"productId": product.id, "favorited": False}

    def test_comments(self, client, customer, auth_headers, make_product):
        product = make_product()

        response = client.post(
            f"/api/products/{product.id}/comment", json={"comment": "Very fresh"}, headers=auth_headers(customer)
        )
        assert response.status_code == 201

        [comment] = client.get(f"/api/products/{product.id}/comments").json()["data"]
        assert comment["comment"] == "Very fresh"
        assert comment["user"]["username"] == customer.username
