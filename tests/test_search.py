from sebeta_mart.models.user import UserRole


def test_product_search_without_matches(client):
    response = client.get("/search", params={"q": "teff", "type": "product"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data == {"type": "product", "count": 0, "results": []}


def test_product_search_is_case_insensitive(client, make_user, make_product):
    seller = make_user(UserRole.SELLER)
    make_product(seller, name="Berbere Spice")
    make_product(seller, name="Coffee Beans")

    response = client.get("/search", params={"q": "berbere"})

    data = response.json()["data"]
    assert data["type"] == "product"
    assert data["count"] == 1
    result = data["results"][0]
    assert result["name"] == "Berbere Spice"
    assert result["price"] == 250.0
    assert result["seller_id"] == seller.id
    assert result["image"] is None


def test_seller_search_only_returns_sellers(client, make_user):
    seller = make_user(UserRole.SELLER, full_name="Tigist Market")
    make_user(UserRole.BUYER, full_name="Tigist Buyer")

    response = client.get("/search", params={"q": "tigist", "type": "seller"})

    data = response.json()["data"]
    assert data["count"] == 1
    assert data["results"] == [{"id": seller.id, "full_name": "Tigist Market"}]


def test_search_results_are_capped(client, make_user, make_product):
    seller = make_user(UserRole.SELLER)
    for i in range(25):
        make_product(seller, name=f"Shiro {i}")

    data = client.get("/search", params={"q": "shiro"}).json()["data"]

    assert data["count"] == 20
    assert len(data["results"]) == 20


def test_search_requires_query(client):
    response = client.get("/search", params={"q": "  "})

    assert response.status_code == 400
    assert response.json()["message"] == "Search query is required"


def test_search_rejects_unknown_type(client):
    response = client.get("/search", params={"q": "coffee", "type": "shop"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid search type"
