import pytest


@pytest.fixture
def catalog(client, admin_headers):
    def create(path, name):
        response = client.post(path, json={"name": name}, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return {
        "category": create("/api/categories/", "Footwear"),
        "other_category": create("/api/categories/", "Outerwear"),
        "small": create("/api/sizes/", "Small"),
        "large": create("/api/sizes/", "Large"),
    }


@pytest.fixture
def create_product(client, admin_headers, catalog):
    def create(name, sizes=None, **fields):
        body = {
            "name": name,
            "description": f"{name} description text",
            "category": catalog["category"],
            "sizes": sizes or [{"size": catalog["small"], "price": 20.0, "stock": 5}],
        }
        body.update(fields)
        response = client.post("/api/products/", json=body, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return create


def test_health_live(client):
    response = client.get("/health/live")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health_ready(client):
    response = client.get("/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["database"]["status"] == "healthy"


def test_admin_routes_require_identity(client, catalog):
    response = client.post("/api/categories/", json={"name": "Hats"})
    assert response.status_code == 401
    response = client.post(
        "/api/products/", json={"name": "x"}, headers={"X-Admin-Id": "  "}
    )
    assert response.status_code == 401


def test_create_product_response_shape(client, catalog, create_product):
    product = create_product(
        "Trail Boot",
        sizes=[{"size": catalog["small"], "price": 80, "salePrice": 60, "stock": 2}],
        images=[{"url": "a.jpg"}, {"url": "b.jpg", "isPrimary": False}],
        tags=["Hiking"],
    )
    assert product["sku"] == "TRAILBOOT"
    assert product["slug"] == "trail-boot"
    assert product["category"]["name"] == "Footwear"
    assert product["sizes"][0]["salePrice"] == 60
    assert product["sizes"][0]["size"]["name"] == "Small"
    assert [image["isPrimary"] for image in product["images"]] == [True, False]
    assert product["primaryImage"]["url"] == "a.jpg"
    assert product["tags"] == ["hiking"]
    assert product["lowestPrice"] == 60
    assert product["inStock"] is True
    assert product["createdBy"] == "admin-1"


def test_duplicate_category_conflicts(client, admin_headers, catalog):
    response = client.post(
        "/api/categories/", json={"name": "footwear"}, headers=admin_headers
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "Category with this name already exists"


def test_category_name_pattern_enforced(client, admin_headers):
    response = client.post(
        "/api/categories/", json={"name": "Shoes!"}, headers=admin_headers
    )
    assert response.status_code == 422


def test_malformed_category_reported_before_size(client, admin_headers, catalog):
    body = {
        "name": "Trail Boot",
        "description": "Waterproof boot for long hikes",
        "category": "not-an-id",
        "sizes": [{"size": "also-bad", "price": 10, "stock": 1}],
    }
    response = client.post("/api/products/", json=body, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid category ID"


def test_sale_price_must_be_below_price(client, admin_headers, catalog):
    body = {
        "name": "Trail Boot",
        "description": "Waterproof boot for long hikes",
        "category": catalog["category"],
        "sizes": [{"size": catalog["small"], "price": 10, "salePrice": 10, "stock": 1}],
    }
    response = client.post("/api/products/", json=body, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Sale price must be less than regular price"


def test_pagination_over_25_products(client, create_product):
    for index in range(25):
        create_product(f"Product {index:02d}")

    first = client.get("/api/products/", params={"limit": 10, "page": 1}).json()
    assert len(first["items"]) == 10
    assert first["pagination"]["totalItems"] == 25
    assert first["pagination"]["totalPages"] == 3
    assert first["pagination"]["hasNextPage"] is True
    assert first["pagination"]["hasPrevPage"] is False

    third = client.get("/api/products/", params={"limit": 10, "page": 3}).json()
    assert len(third["items"]) == 5
    assert third["pagination"]["hasNextPage"] is False
    assert third["pagination"]["hasPrevPage"] is True

    fourth = client.get("/api/products/", params={"limit": 10, "page": 4}).json()
    assert fourth["items"] == []


def test_pages_do_not_overlap(client, create_product):
    for index in range(7):
        create_product(f"Product {index}")
    seen = []
    for page in (1, 2, 3):
        response = client.get(
            "/api/products/", params={"limit": 3, "page": page, "sortBy": "name"}
        )
        seen.extend(item["id"] for item in response.json()["items"])
    assert len(seen) == len(set(seen)) == 7


def test_price_range_uses_same_active_variant(client, catalog, create_product):
    small, large = catalog["small"], catalog["large"]
    create_product("In Range", sizes=[{"size": small, "price": 30, "stock": 1}])
    create_product(
        "Sale In Range",
        sizes=[{"size": small, "price": 80, "salePrice": 45, "stock": 1}],
    )
    create_product(
        "Outside Both Ends",
        sizes=[
            {"size": small, "price": 5, "stock": 1},
            {"size": large, "price": 60, "stock": 1},
        ],
    )
    create_product(
        "Inactive Variant",
        sizes=[{"size": small, "price": 20, "stock": 1, "isActive": False}],
    )

    response = client.get("/api/products/", params={"minPrice": 10, "maxPrice": 50})
    names = sorted(item["name"] for item in response.json()["items"])
    assert names == ["In Range", "Sale In Range"]


def test_search_and_price_compose(client, catalog, create_product):
    pricey = [{"size": catalog["small"], "price": 150, "stock": 1}]
    create_product("Hiking Boot")
    create_product("Luxury Boot", sizes=pricey)
    create_product("Luxury Scarf", sizes=pricey)

    response = client.get("/api/products/", params={"search": "boot", "minPrice": 100})
    assert [item["name"] for item in response.json()["items"]] == ["Luxury Boot"]


def test_search_matches_tags_and_brand(client, create_product):
    create_product("Plain Item", tags=["Waterproof"])
    create_product("Other Item", brand="Waterproof Co")
    create_product("Unrelated Item")
    response = client.get("/api/products/", params={"search": "WATERPROOF"})
    names = sorted(item["name"] for item in response.json()["items"])
    assert names == ["Other Item", "Plain Item"]


def test_filters_by_category_size_and_flags(client, catalog, create_product):
    create_product("Boot A", isFeatured=True)
    create_product("Coat B", category=catalog["other_category"])
    create_product(
        "Boot C", sizes=[{"size": catalog["large"], "price": 20, "stock": 1}]
    )

    def names(**params):
        response = client.get("/api/products/", params=params)
        assert response.status_code == 200, response.text
        return sorted(item["name"] for item in response.json()["items"])

    assert names(category=catalog["other_category"]) == ["Coat B"]
    assert names(size=catalog["large"]) == ["Boot C"]
    assert names(isFeatured="true") == ["Boot A"]
    assert names(isFeatured="yes") == ["Boot C", "Coat B"]
    assert names(sortBy="name", sortOrder="asc") == ["Boot A", "Boot C", "Coat B"]


def test_list_rejects_malformed_filter_ids(client):
    response = client.get("/api/products/", params={"category": "abc", "size": "x"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid category ID"


def test_product_lookups(client, catalog, create_product):
    product = create_product("Trail Boot")

    assert client.get(f"/api/products/{product['id']}").json()["name"] == "Trail Boot"
    assert client.get("/api/products/abc").status_code == 400
    assert client.get("/api/products/9999").status_code == 404

    client.get("/api/products/slug/trail-boot")
    viewed = client.get("/api/products/slug/trail-boot").json()
    assert viewed["viewCount"] == 2
    assert client.get("/api/products/slug/missing").status_code == 404


def test_category_products_and_featured(client, catalog, create_product):
    create_product("Trail Boot", isFeatured=True)
    create_product("Hidden Boot", isActive=False, isFeatured=True)

    response = client.get(f"/api/products/category/{catalog['category']}")
    body = response.json()
    assert body["category"]["name"] == "Footwear"
    assert [item["name"] for item in body["items"]] == ["Trail Boot"]
    assert client.get("/api/products/category/9999").status_code == 404
    assert client.get("/api/products/category/abc").status_code == 400

    featured = client.get("/api/products/featured").json()
    assert [item["name"] for item in featured] == ["Trail Boot"]


def test_update_toggle_delete(client, admin_headers, catalog, create_product):
    product = create_product("Trail Boot")
    product_id = product["id"]

    response = client.put(
        f"/api/products/{product_id}",
        json={"name": "Summit Boot", "brand": "Acme"},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    assert response.json()["slug"] == "summit-boot"
    assert response.json()["brand"] == "Acme"

    response = client.put(
        f"/api/products/{product_id}", json={"category": 9999}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Category not found"

    response = client.patch(
        f"/api/products/{product_id}/toggle-status", headers=admin_headers
    )
    assert response.json() == {"id": product_id, "isActive": False}
    response = client.patch(
        f"/api/products/{product_id}/toggle-featured", headers=admin_headers
    )
    assert response.json() == {"id": product_id, "isFeatured": True}

    assert client.delete(f"/api/products/{product_id}", headers=admin_headers).status_code == 204
    assert client.delete(f"/api/products/{product_id}", headers=admin_headers).status_code == 404


def test_category_and_size_admin_crud(client, admin_headers, catalog):
    category_id = catalog["category"]
    response = client.put(
        f"/api/categories/{category_id}", json={"name": "Shoes"}, headers=admin_headers
    )
    assert response.json()["code"] == "SHOES"
    assert response.json()["updatedBy"] == "admin-1"

    listing = client.get(
        "/api/categories/", params={"search": "sho"}, headers=admin_headers
    ).json()
    assert [item["name"] for item in listing["items"]] == ["Shoes"]

    response = client.put(
        f"/api/sizes/{catalog['small']}", json={"name": "Large"}, headers=admin_headers
    )
    assert response.status_code == 409

    assert client.delete(f"/api/sizes/{catalog['large']}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/sizes/{catalog['large']}", headers=admin_headers).status_code == 404
    assert client.get("/api/sizes/abc", headers=admin_headers).status_code == 400


def test_dangling_category_still_listed(client, admin_headers, catalog, create_product):
    product = create_product("Trail Boot")
    client.delete(f"/api/categories/{catalog['category']}", headers=admin_headers)

    body = client.get(f"/api/products/{product['id']}").json()
    assert body["categoryId"] == catalog["category"]
    assert body["category"] is None


def test_public_categories(client, catalog):
    listing = client.get("/api/public/categories/").json()
    assert [item["name"] for item in listing["items"]] == ["Footwear", "Outerwear"]
    assert "createdBy" not in listing["items"][0]

    response = client.get("/api/public/categories/slug/outerwear")
    assert response.json()["id"] == catalog["other_category"]
    assert client.get(f"/api/public/categories/{catalog['category']}").status_code == 200
    assert client.get("/api/public/categories/9999").status_code == 404


@pytest.mark.parametrize(
    "price, sale_price", [("NaN", "null"), ("10", "NaN"), ("Infinity", "5")]
)
def test_non_finite_prices_rejected(client, admin_headers, catalog, price, sale_price):
    # Raw body so the NaN and Infinity literals reach the JSON parser
    body = (
        '{"name": "Trail Boot", "description": "Waterproof boot for long hikes", '
        f'"category": {catalog["category"]}, "sizes": [{{"size": {catalog["small"]}, '
        f'"price": {price}, "salePrice": {sale_price}, "stock": 1}}]}}'
    )
    response = client.post(
        "/api/products/",
        content=body,
        headers={**admin_headers, "Content-Type": "application/json"},
    )
    assert response.status_code == 400, response.text
    assert client.get("/api/products/").json()["pagination"]["totalItems"] == 0


def test_huge_page_returns_empty_page(client, create_product):
    create_product("Trail Boot")
    response = client.get("/api/products/", params={"page": "9" * 25})
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["items"] == []
    assert body["pagination"]["totalItems"] == 1
    assert body["pagination"]["hasNextPage"] is False


def test_equal_sort_keys_keep_creation_order(client, create_product):
    created = [create_product(f"Product {name}")["id"] for name in "EDCBA"]

    listed = []
    for page in (1, 2, 3):
        response = client.get(
            "/api/products/",
            params={"sortBy": "isFeatured", "limit": 2, "page": page},
        )
        listed.extend(item["id"] for item in response.json()["items"])
    assert listed == created

    for order in ("asc", "desc"):
        response = client.get(
            "/api/products/",
            params={"sortBy": "isFeatured", "sortOrder": order, "limit": 10},
        )
        assert [item["id"] for item in response.json()["items"]] == created
