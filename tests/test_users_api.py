"""
Route tests for the JSON API and the page-style routes.
"""

from bson import ObjectId


def create(client, **body):
    body.setdefault("name", "Ann")
    body.setdefault("email", "ann@ex.com")
    return client.post("/api/users", json=body)


class TestJsonApi:

    def test_create_and_fetch(self, client):
        response = create(client, email="ANN@EX.com", image=" https://example.com/a.png ")

        assert response.status_code == 201
        user = response.json()
        assert user["email"] == "ann@ex.com"
        assert user["image"] == "https://example.com/a.png"

        fetched = client.get(f"/api/users/{user['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == user

    def test_snapshot(self, client):
        create(client)
        create(client, name="Bob", email="bob@ex.com")

        response = client.get("/api/users")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["count"] == 2
        assert [u["name"] for u in data["data"]] == ["Ann", "Bob"]

    def test_missing_fields(self, client):
        response = client.post("/api/users", json={"image": ""})

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "MISSING_FIELDS"
        assert data["details"] == {"fields": ["name", "email"]}

    def test_invalid_email_leaves_store_unchanged(self, client):
        response = create(client, name="Bob", email="not-an-email")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_EMAIL"
        assert client.get("/api/users").json()["count"] == 0

    def test_invalid_image(self, client):
        response = create(client, name="Cid", email="c@d.com", image="not a url")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_IMAGE_URL"

    def test_duplicate_email(self, client):
        create(client)

        response = create(client, name="Other", email="Ann@Ex.COM")

        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_EMAIL"
        assert client.get("/api/users").json()["count"] == 1

    def test_update(self, client):
        user = create(client).json()

        response = client.put(
            f"/api/users/{user['id']}",
            json={"name": " Annie ", "email": "annie@ex.com", "image": ""}
        )

        assert response.status_code == 200
        assert response.json() == {"id": user["id"], "name": "Annie", "email": "annie@ex.com", "image": ""}

    def test_update_unknown_user(self, client):
        response = client.put("/api/users/999", json={"name": "Ghost", "email": "ghost@ex.com"})
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_delete_twice(self, client):
        user = create(client).json()

        first = client.delete(f"/api/users/{user['id']}")
        second = client.delete(f"/api/users/{user['id']}")

        assert first.status_code == 200
        assert first.json() == user
        assert second.status_code == 404

    def test_wrong_body_type_is_request_validation_error(self, client):
        response = client.post("/api/users", json={"name": ["Ann"], "email": "ann@ex.com"})
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestPages:

    def test_read_lists_users(self, client):
        create(client)
        response = client.get("/read")
        assert response.status_code == 200
        assert response.json()["users"][0]["email"] == "ann@ex.com"

    def test_create_form_descriptor(self, client):
        response = client.get("/create")
        assert response.json()["fields"] == ["name", "email", "image"]

    def test_form_create_redirects_to_read(self, client):
        response = client.post(
            "/create",
            data={"name": "Ann", "email": "ANN@ex.com", "image": ""},
            follow_redirects=False
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/read"
        assert client.get("/read").json()["users"][0]["email"] == "ann@ex.com"

    def test_json_create_is_accepted(self, client):
        response = client.post("/create", json={"name": "Ann", "email": "ann@ex.com"}, follow_redirects=False)
        assert response.status_code == 303

    def test_form_create_validation_error(self, client):
        response = client.post("/create", data={"name": "", "email": "ann@ex.com"})
        assert response.status_code == 400
        assert response.json()["details"] == {"fields": ["name"]}

    def test_edit_update_delete(self, client):
        user = create(client).json()

        edit = client.get(f"/edit/{user['id']}")
        assert edit.json()["user"] == user

        update = client.post(
            f"/update/{user['id']}",
            data={"name": "Ann B", "email": "ann@ex.com"},
            follow_redirects=False
        )
        assert update.status_code == 303
        assert client.get(f"/api/users/{user['id']}").json()["name"] == "Ann B"

        delete = client.get(f"/delete/{user['id']}", follow_redirects=False)
        assert delete.status_code == 303
        assert client.get(f"/edit/{user['id']}").status_code == 404

    def test_uploaded_file_counts_as_missing(self, client):
        response = client.post(
            "/create",
            data={"email": "ann@ex.com"},
            files={"name": ("name.txt", b"Ann", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_FIELDS"
        assert response.json()["details"] == {"fields": ["name"]}
        assert client.get("/read").json()["users"] == []

    def test_update_conflict(self, client):
        create(client)
        bob = create(client, name="Bob", email="bob@ex.com").json()

        response = client.post(f"/update/{bob['id']}", data={"name": "Bob", "email": "ann@ex.com"})

        assert response.status_code == 409


class TestMongoBackendRoutes:

    def test_malformed_id_rejected_before_store(self, mongo_client):
        for response in (
            mongo_client.get("/api/users/123"),
            mongo_client.get("/edit/123"),
            mongo_client.get("/delete/123"),
            mongo_client.put("/api/users/123", json={"name": "A", "email": "a@b.co"}),
        ):
            assert response.status_code == 400
            assert response.json()["code"] == "INVALID_USER_ID"

    def test_round_trip(self, mongo_client):
        user = create(mongo_client).json()
        assert ObjectId.is_valid(user["id"])
        assert mongo_client.get(f"/api/users/{user['id']}").json() == user

    def test_unknown_object_id(self, mongo_client):
        response = mongo_client.get(f"/api/users/{ObjectId()}")
        assert response.status_code == 404

    def test_store_unavailable(self, mongo_client, users_collection):
        from pymongo.errors import ServerSelectionTimeoutError
        users_collection.fail_with = ServerSelectionTimeoutError("no servers")

        response = mongo_client.get("/api/users")

        assert response.status_code == 500
        assert response.json()["code"] == "STORE_UNAVAILABLE"

    def test_schema_rejection(self, mongo_client, users_collection, monkeypatch):
        from unittest.mock import AsyncMock
        from pymongo.errors import WriteError
        monkeypatch.setattr(users_collection, "insert_one", AsyncMock(side_effect=WriteError(
            "Document failed validation", code=121, details={"errInfo": {"failingDocumentId": ObjectId()}}
        )))

        response = create(mongo_client)

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "SCHEMA_VALIDATION_FAILED"
        assert isinstance(data["details"]["errInfo"]["failingDocumentId"], str)
