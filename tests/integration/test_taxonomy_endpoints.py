"""
Integration tests for category and tag endpoints.
"""

from zenith.models import Tag
from tests.utils_jwt import auth_header_for


def test_admin_creates_category(client, admin):
    response = client.post(
        "/api/v1/admin/categories",
        json={"name": "Science", "description": "Papers and experiments"},
        headers=auth_header_for(admin),
    )

    assert response.status_code == 201
    assert response.json()["name"] == "Science"
    assert response.json()["post_count"] == 0


def test_regular_user_cannot_create_category(client, auth_header):
    response = client.post("/api/v1/admin/categories", json={"name": "Science"}, headers=auth_header)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_anonymous_cannot_create_category(client):
    response = client.post("/api/v1/admin/categories", json={"name": "Science"})

    assert response.status_code == 401


def test_duplicate_category(client, admin, category):
    response = client.post("/api/v1/admin/categories", json={"name": "engineering"}, headers=auth_header_for(admin))

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_RESOURCE"


def test_blank_category_name(client, admin):
    response = client.post("/api/v1/admin/categories", json={"name": "   "}, headers=auth_header_for(admin))

    assert response.status_code == 400


def test_delete_category_in_use(client, admin, author, category, make_post):
    make_post(author)

    response = client.delete(f"/api/v1/admin/categories/{category.id}", headers=auth_header_for(admin))

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "RESOURCE_HAS_DEPENDENTS"
    assert client.get(f"/api/v1/categories/{category.id}").status_code == 200


def test_delete_unused_category(client, admin, category):
    category_id = category.id

    response = client.delete(f"/api/v1/admin/categories/{category_id}", headers=auth_header_for(admin))

    assert response.status_code == 204
    assert client.get(f"/api/v1/categories/{category_id}").status_code == 404


def test_update_category(client, admin, category):
    response = client.put(
        f"/api/v1/admin/categories/{category.id}",
        json={"description": "Building things"},
        headers=auth_header_for(admin),
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Engineering"
    assert response.json()["description"] == "Building things"


def test_public_category_listing(client, category):
    response = client.get("/api/v1/categories")

    assert response.status_code == 200
    assert [c["name"] for c in response.json()["content"]] == ["Engineering"]


def test_tag_crud(client, admin):
    header = auth_header_for(admin)

    created = client.post("/api/v1/admin/tags", json={"name": "python"}, headers=header)
    tag_id = created.json()["id"]
    renamed = client.put(f"/api/v1/admin/tags/{tag_id}", json={"name": "Python"}, headers=header)
    deleted = client.delete(f"/api/v1/admin/tags/{tag_id}", headers=header)

    assert created.status_code == 201
    assert renamed.json()["name"] == "Python"
    assert deleted.status_code == 204
    assert client.get(f"/api/v1/tags/{tag_id}").status_code == 404


def test_bulk_create_tags(client, db_session, admin):
    db_session.add(Tag(name="python"))
    db_session.commit()

    response = client.post(
        "/api/v1/admin/tags/bulk", json={"names": ["Python", "rust", "go"]}, headers=auth_header_for(admin)
    )

    assert response.status_code == 200
    assert [t["name"] for t in response.json()] == ["python", "rust", "go"]


def test_bulk_create_rejects_overlong_name(client, db_session, admin):
    response = client.post(
        "/api/v1/admin/tags/bulk", json={"names": ["rust", "y" * 60]}, headers=auth_header_for(admin)
    )

    assert response.status_code == 400
    assert db_session.query(Tag).count() == 0


def test_delete_tag_in_use(client, db_session, admin, author, make_post):
    tag = Tag(name="python")
    make_post(author, tags=[tag])

    response = client.delete(f"/api/v1/admin/tags/{tag.id}", headers=auth_header_for(admin))

    assert response.status_code == 409


def test_tag_listing_sorted_by_name(client, db_session):
    db_session.add_all([Tag(name="zeta"), Tag(name="alpha")])
    db_session.commit()

    response = client.get("/api/v1/tags", params={"sortBy": "name"})

    assert [t["name"] for t in response.json()["content"]] == ["alpha", "zeta"]
