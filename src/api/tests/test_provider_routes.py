"""Route tests for /provider: status mapping, auth guards, problem documents."""

import unittest
import uuid
from datetime import datetime, timezone

from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_provider_repo
from adapter.fake.provider_repository import FakeProviderRepository
from domain.model.provider import Provider
from domain.model.user import DELETE_PROVIDER_CLAIM, User, UserClaim
from services.token_service import create_access_token


def _auth_headers(*claims: UserClaim) -> dict:
    now = datetime.now(timezone.utc)
    user = User(id='user-1', email='user@example.com', created_at=now, updated_at=now, claims=list(claims))
    return {"Authorization": f"Bearer {create_access_token(user).access_token}"}


def _payload(**overrides) -> dict:
    payload = {"name": "Acme", "document": "12345678901", "active": True}
    payload.update(overrides)
    return payload


class ProviderRouteTestCase(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        self.repo = FakeProviderRepository()
        app.dependency_overrides[get_provider_repo] = lambda: self.repo
        self.headers = _auth_headers()
        self.existing = Provider.create(name='Existing', document='98765432100', active=False)
        self.repo.store[self.existing.id] = self.existing

    def tearDown(self):
        """Clean up dependency overrides."""
        app.dependency_overrides.clear()


class TestReadProviders(ProviderRouteTestCase):

    def test_list_returns_all(self):
        response = self.client.get("/provider")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [{
            "id": str(self.existing.id), "name": "Existing", "document": "98765432100", "active": False,
        }])

    def test_list_empty(self):
        self.repo.store.clear()

        response = self.client.get("/provider")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_get_missing_is_404(self):
        response = self.client.get(f"/provider/{uuid.uuid4()}")
        self.assertEqual(response.status_code, 404)

    def test_get_malformed_id_is_400_problem(self):
        response = self.client.get("/provider/not-a-uuid")

        self.assertEqual(response.status_code, 400)
        self.assertIn("provider_id", response.json()["errors"])


class TestCreateProvider(ProviderRouteTestCase):

    def test_post_then_get_returns_posted_payload(self):
        payload = _payload(id=str(uuid.uuid4()))

        created = self.client.post("/provider", json=payload, headers=self.headers)
        fetched = self.client.get(f"/provider/{payload['id']}")

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.headers["location"], f"/provider/{payload['id']}")
        self.assertEqual(created.json(), payload)
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json(), payload)

    def test_post_stores_trimmed_name_and_echoes_stored_form(self):
        created = self.client.post("/provider", json=_payload(name="  Acme  "), headers=self.headers)
        fetched = self.client.get(f"/provider/{created.json()['id']}")

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.json()["name"], "Acme")
        self.assertEqual(fetched.json(), created.json())

    def test_post_generates_id(self):
        response = self.client.post("/provider", json=_payload(), headers=self.headers)

        self.assertEqual(response.status_code, 201)
        provider_id = response.json()["id"]
        self.assertEqual(response.headers["location"], f"/provider/{provider_id}")
        self.assertIn(uuid.UUID(provider_id), self.repo.store)

    def test_post_requires_authentication(self):
        response = self.client.post("/provider", json=_payload())

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers["www-authenticate"], "Bearer")
        self.assertEqual(len(self.repo.store), 1)

    def test_post_with_invalid_token(self):
        response = self.client.post("/provider", json=_payload(), headers={"Authorization": "Bearer garbage"})
        self.assertEqual(response.status_code, 401)

    def test_post_invalid_payload_is_validation_problem(self):
        response = self.client.post("/provider", json={"name": "A", "document": "12"}, headers=self.headers)

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["title"], "One or more validation errors occurred.")
        self.assertEqual(body["status"], 400)
        self.assertEqual(set(body["errors"]), {"name", "document"})

    def test_post_duplicate_id_is_save_failure(self):
        response = self.client.post(
            "/provider", json=_payload(id=str(self.existing.id)), headers=self.headers
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"detail": "There was a problem saving the record"})

    def test_post_malformed_json_is_400(self):
        response = self.client.post(
            "/provider",
            content=b"{not json",
            headers={**self.headers, "Content-Type": "application/json"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("errors", response.json())


class TestUpdateProvider(ProviderRouteTestCase):

    def test_put_replaces_record(self):
        response = self.client.put(
            f"/provider/{self.existing.id}", json=_payload(name="Renamed"), headers=self.headers
        )

        self.assertEqual(response.status_code, 204)
        self.assertEqual(response.content, b"")
        stored = self.repo.store[self.existing.id]
        self.assertEqual((stored.name, stored.active), ("Renamed", True))

    def test_put_missing_is_404_without_mutation(self):
        missing = uuid.uuid4()

        response = self.client.put(f"/provider/{missing}", json=_payload(), headers=self.headers)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(list(self.repo.store), [self.existing.id])

    def test_put_invalid_payload_leaves_record_unchanged(self):
        response = self.client.put(
            f"/provider/{self.existing.id}", json=_payload(document="bad"), headers=self.headers
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("document", response.json()["errors"])
        self.assertEqual(self.repo.store[self.existing.id], self.existing)

    def test_put_requires_authentication(self):
        response = self.client.put(f"/provider/{self.existing.id}", json=_payload())
        self.assertEqual(response.status_code, 401)


class TestDeleteProvider(ProviderRouteTestCase):

    def test_delete_without_claim_is_forbidden(self):
        response = self.client.delete(f"/provider/{self.existing.id}", headers=self.headers)

        self.assertEqual(response.status_code, 403)
        self.assertIn(self.existing.id, self.repo.store)

    def test_delete_unauthenticated_is_401(self):
        response = self.client.delete(f"/provider/{self.existing.id}")
        self.assertEqual(response.status_code, 401)

    def test_delete_with_claim_then_get_is_404(self):
        headers = _auth_headers(UserClaim(DELETE_PROVIDER_CLAIM, "true"))

        response = self.client.delete(f"/provider/{self.existing.id}", headers=headers)

        self.assertEqual(response.status_code, 204)
        self.assertEqual(self.client.get(f"/provider/{self.existing.id}").status_code, 404)

    def test_delete_missing_with_claim_is_404(self):
        headers = _auth_headers(UserClaim(DELETE_PROVIDER_CLAIM, "true"))

        response = self.client.delete(f"/provider/{uuid.uuid4()}", headers=headers)

        self.assertEqual(response.status_code, 404)


if __name__ == '__main__':
    unittest.main()
