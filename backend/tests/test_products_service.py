import pytest

from app.core.exceptions import (
    DuplicateNameError,
    InvalidReferenceError,
    InvariantViolationError,
    NotFoundError,
)
from app.db.models import Product, ProductSizeVariant
from app.services.catalog_entities import category_service, size_service
from app.services.products import ProductService

ADMIN = "admin-1"


@pytest.fixture
def catalog(db):
    category = category_service(db).create("Footwear", ADMIN)
    small = size_service(db).create("Small", ADMIN)
    large = size_service(db).create("Large", ADMIN)
    return {"category": category.id, "small": small.id, "large": large.id}


def payload(catalog, **overrides):
    data = {
        "name": "Trail Boot",
        "description": "Waterproof boot for long hikes",
        "category": catalog["category"],
        "sizes": [{"size": catalog["small"], "price": 80.0, "stock": 4}],
        "images": [],
        "tags": [],
        "is_active": True,
    }
    data.update(overrides)
    return data


def test_create_derives_identity_and_children(db, catalog):
    product = ProductService(db).create(
        payload(
            catalog,
            sizes=[
                {"size": catalog["small"], "price": 80.0, "sale_price": 60.0, "stock": 4},
                {"size": str(catalog["large"]), "price": 90.0, "stock": 0},
            ],
            images=[{"url": "a.jpg"}, {"url": "b.jpg"}],
            tags=[" Hiking ", "Outdoor"],
            dimensions={"length": 30.0, "width": None, "height": 12.0},
        ),
        ADMIN,
    )
    assert product.sku == "TRAILBOOT"
    assert product.slug == "trail-boot"
    assert product.category_id == catalog["category"]
    assert product.category.name == "Footwear"
    assert [v.size_id for v in product.sizes] == [catalog["small"], catalog["large"]]
    assert product.sizes[0].size.name == "Small"
    assert product.tags == ["hiking", "outdoor"]
    assert [i.is_primary for i in product.images] == [True, False]
    assert product.primary_image.url == "a.jpg"
    assert product.dimensions == {"length": 30.0, "width": None, "height": 12.0}
    assert product.lowest_price == 60.0
    assert product.highest_price == 90.0
    assert product.total_stock == 4
    assert product.in_stock
    assert product.view_count == 0


def test_category_checked_before_sizes(db, catalog):
    with pytest.raises(InvalidReferenceError) as excinfo:
        ProductService(db).create(
            payload(catalog, category="abc", sizes=[{"size": "xyz", "price": 1, "stock": 1}]),
            ADMIN,
        )
    assert excinfo.value.field == "category"
    assert excinfo.value.message == "Invalid category ID"


def test_unknown_category(db, catalog):
    with pytest.raises(InvalidReferenceError, match="Category not found") as excinfo:
        ProductService(db).create(payload(catalog, category=9999), ADMIN)
    assert excinfo.value.reason == InvalidReferenceError.NOT_FOUND


def test_first_bad_size_reported(db, catalog):
    sizes = [
        {"size": catalog["small"], "price": 10, "stock": 1},
        {"size": 9999, "price": 10, "stock": 1},
        {"size": "bad", "price": 10, "stock": 1},
    ]
    with pytest.raises(InvalidReferenceError, match="Size with ID 9999 not found") as excinfo:
        ProductService(db).create(payload(catalog, sizes=sizes), ADMIN)
    assert excinfo.value.index == 1


def test_empty_sizes_rejected(db, catalog):
    with pytest.raises(InvariantViolationError, match="At least one size is required"):
        ProductService(db).create(payload(catalog, sizes=[]), ADMIN)


def test_sale_price_not_below_price_rejected(db, catalog):
    sizes = [{"size": catalog["small"], "price": 50, "sale_price": 50, "stock": 1}]
    with pytest.raises(InvariantViolationError):
        ProductService(db).create(payload(catalog, sizes=sizes), ADMIN)
    assert db.query(Product).count() == 0


def test_duplicate_name_rejected(db, catalog):
    service = ProductService(db)
    service.create(payload(catalog), ADMIN)
    with pytest.raises(DuplicateNameError) as excinfo:
        service.create(payload(catalog, name="Trail-Boot"), ADMIN)
    assert excinfo.value.field == "sku"


def test_update_rederives_identity_and_replaces_children(db, catalog):
    service = ProductService(db)
    product = service.create(payload(catalog, images=[{"url": "a.jpg"}]), ADMIN)
    updated = service.update(
        product.id,
        {
            "name": "Summit Boot",
            "sizes": [{"size": catalog["large"], "price": 120.0, "stock": 2}],
            "images": [
                {"url": "x.jpg", "is_primary": False},
                {"url": "y.jpg", "is_primary": True},
            ],
            "brand": None,
            "is_featured": None,
        },
        "admin-2",
    )
    assert (updated.sku, updated.slug) == ("SUMMITBOOT", "summit-boot")
    assert [v.size_id for v in updated.sizes] == [catalog["large"]]
    assert [i.is_primary for i in updated.images] == [False, True]
    assert updated.is_featured is False
    assert updated.updated_by == "admin-2"
    assert db.query(ProductSizeVariant).count() == 1


def test_rejected_update_leaves_product_untouched(db, catalog):
    service = ProductService(db)
    product = service.create(payload(catalog), ADMIN)
    with pytest.raises(InvariantViolationError):
        service.update(
            product.id,
            {
                "name": "Renamed Boot",
                "sizes": [{"size": catalog["small"], "price": 10, "sale_price": 20, "stock": 1}],
            },
            ADMIN,
        )
    db.expire_all()
    product = service.get(product.id)
    assert product.name == "Trail Boot"
    assert product.sizes[0].price == 80.0


def test_get_by_slug_counts_views(db, catalog):
    service = ProductService(db)
    service.create(payload(catalog), ADMIN)
    service.get_by_slug("trail-boot")
    product = service.get_by_slug("trail-boot")
    assert product.view_count == 2


def test_toggles(db, catalog):
    service = ProductService(db)
    product = service.create(payload(catalog), ADMIN)
    assert service.toggle_status(product.id, ADMIN).is_active is False
    assert service.toggle_featured(product.id, ADMIN).is_featured is True


def test_delete_removes_owned_rows(db, catalog):
    service = ProductService(db)
    product = service.create(payload(catalog, images=[{"url": "a.jpg"}]), ADMIN)
    product_id = product.id
    service.delete(product_id)
    assert db.query(ProductSizeVariant).count() == 0
    with pytest.raises(NotFoundError):
        service.get(product_id)


def test_by_category_requires_existing_category(db, catalog):
    service = ProductService(db)
    service.create(payload(catalog), ADMIN)
    service.create(payload(catalog, name="Hidden Boot", is_active=False), ADMIN)

    page, category = service.by_category(str(catalog["category"]))
    assert category.name == "Footwear"
    assert [p.name for p in page.items] == ["Trail Boot"]

    with pytest.raises(InvalidReferenceError):
        service.by_category("abc")
    with pytest.raises(NotFoundError):
        service.by_category(9999)


def test_featured_only_lists_active_featured(db, catalog):
    service = ProductService(db)
    service.create(payload(catalog, is_featured=True), ADMIN)
    service.create(payload(catalog, name="Quiet Boot"), ADMIN)
    service.create(payload(catalog, name="Old Boot", is_featured=True, is_active=False), ADMIN)
    assert [p.name for p in service.featured()] == ["Trail Boot"]
