"""
HTTP Surface Tests

Exercise the FastAPI app end to end with the in-memory stack and the stub
provider. No network access.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from api.deps import get_infra
from infra import InfraBootstrap, InfraConfig
from main import app
from providers.stub import STUB_REPLY
from storage import OrderRecord

ADMIN = {"X-User-Role": "admin", "X-User-Id": "1"}
STAFF = {"X-User-Role": "staff", "X-User-Id": "2"}
CUSTOMER = {"X-User-Role": "customer", "X-User-Id": "7", "X-User-Name": "Dana"}


@pytest.fixture
def infra(secret):
    infra = InfraBootstrap(InfraConfig(active_models=["stub"], firewall_secret_seed=secret))
    infra.firewall_state.enabled = True
    infra.orders.add(OrderRecord(order_number="ORD-1", user_id=7))
    infra.orders.add(OrderRecord(order_number="ORD-2", user_id=7, notes="@WAR# confidential"))
    infra.orders.add(OrderRecord(order_number="ORD-3", user_id=8))
    return infra


@pytest.fixture
def client(infra):
    app.dependency_overrides[get_infra] = lambda: infra
    yield TestClient(app)
    app.dependency_overrides.clear()


def order_numbers(response):
    return [o["order_number"] for o in response.json()]


# ═══════════════════════════════════════════════════════════════════════════════
# CHAT
# ═══════════════════════════════════════════════════════════════════════════════


class TestChat:
    def test_chat_success(self, client):
        response = client.post("/ai/chat", json={"message": "Hi"}, headers=CUSTOMER)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == STUB_REPLY
        assert body["data"]["provider"] == "stub"
        assert "error_kind" not in body

    def test_provider_failure_is_tagged_200(self, client):
        response = client.post(
            "/ai/chat",
            json={"message": "[fail]", "assistant_id": "user_help"},
            headers=CUSTOMER,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["error_kind"] == "generation_failed"
        assert "data" not in body

    def test_denied_role_returns_403(self, client):
        response = client.post(
            "/ai/chat",
            json={"message": "Stats?", "assistant_id": "admin_tools"},
            headers=CUSTOMER,
        )
        assert response.status_code == 403

    def test_missing_role_returns_403(self, client):
        response = client.post("/ai/chat", json={"message": "Hi"})
        assert response.status_code == 403

    def test_unknown_assistant_returns_404(self, client):
        response = client.post("/ai/chat", json={"message": "Hi", "assistant_id": "nope"}, headers=ADMIN)
        assert response.status_code == 404

    def test_empty_message_rejected(self, client):
        response = client.post("/ai/chat", json={"message": ""}, headers=ADMIN)
        assert response.status_code == 422

    def test_chat_never_leaks_hidden_orders(self, client, infra):
        """An order the caller cannot list never reaches the model prompt."""
        stub = infra.providers.get("stub")
        other_customer = {"X-User-Role": "customer", "X-User-Id": "8"}
        assert order_numbers(client.get("/orders", headers=other_customer)) == ["ORD-3"]

        with patch.object(stub, "_post", wraps=stub._post) as spy:
            response = client.post(
                "/ai/chat",
                json={"message": "hi", "context": {"order_id": 2}},
                headers=other_customer,
            )

        assert response.json()["success"] is True
        prompt = spy.call_args.args[0].body["prompt"]
        assert "ORD-2" not in prompt
        assert "confidential" not in prompt

    def test_assistants_listed_by_role(self, client):
        customer_ids = [a["id"] for a in client.get("/ai/assistants", headers=CUSTOMER).json()]
        staff_ids = [a["id"] for a in client.get("/ai/assistants", headers=STAFF).json()]

        assert customer_ids == ["order", "user_help"]
        assert staff_ids == ["order", "admin_tools", "user_help"]


# ═══════════════════════════════════════════════════════════════════════════════
# PROVIDER ADMINISTRATION
# ═══════════════════════════════════════════════════════════════════════════════


class TestProviderAdmin:
    def test_providers_admin_only(self, client):
        assert client.get("/ai/providers", headers=STAFF).status_code == 403

        body = client.get("/ai/providers", headers=ADMIN).json()
        assert body["active"] == ["stub"]
        ids = {p["id"]: p for p in body["providers"]}
        assert ids["gpt"]["configured"] is False
        assert ids["stub"]["active"] is True

    def test_configure_provider(self, client, infra):
        response = client.put("/ai/providers/gpt", json={"values": {"api_key": "sk-test"}}, headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["configured"] is True
        assert infra.providers.get("gpt").is_configured()

    def test_set_active_rejects_unknown(self, client):
        response = client.put("/ai/providers/active", json={"provider_ids": ["bogus"]}, headers=ADMIN)
        assert response.status_code == 422

    def test_set_active(self, client, infra):
        response = client.put("/ai/providers/active", json={"provider_ids": ["gemini", "stub"]}, headers=ADMIN)
        assert response.json() == {"active": ["gemini", "stub"]}

    def test_validate_without_key(self, client):
        with patch("providers.base.requests.post") as mock_post:
            response = client.post("/ai/providers/gpt/validate", json={"values": {}}, headers=ADMIN)

        assert response.json() == {"valid": False}
        mock_post.assert_not_called()

    def test_validate_with_working_key(self, client):
        reply = MagicMock(status_code=200)
        reply.json.return_value = {"choices": [{"message": {"content": "ok"}}], "usage": {"total_tokens": 2}}

        with patch("providers.base.requests.post", return_value=reply):
            response = client.post(
                "/ai/providers/deepseek/validate",
                json={"values": {"api_key": "sk-good"}},
                headers=ADMIN,
            )

        assert response.json() == {"valid": True}

    def test_validate_unknown_provider(self, client):
        response = client.post("/ai/providers/nope/validate", json={"values": {}}, headers=ADMIN)
        assert response.status_code == 404


# ═══════════════════════════════════════════════════════════════════════════════
# ORDERS + FIREWALL
# ═══════════════════════════════════════════════════════════════════════════════


class TestOrdersThroughFirewall:
    def test_customer_sees_own_unrestricted_orders(self, client):
        assert order_numbers(client.get("/orders", headers=CUSTOMER)) == ["ORD-1"]

    def test_customer_without_id_sees_nothing(self, client):
        assert client.get("/orders", headers={"X-User-Role": "customer"}).json() == []

    def test_staff_sees_everything(self, client):
        assert order_numbers(client.get("/orders", headers=STAFF)) == ["ORD-1", "ORD-2", "ORD-3"]

    def test_lockdown_cycle(self, client, secret):
        response = client.get("/firewall/emergency", params={"action": "lockdown", "key": secret})
        assert response.status_code == 200
        assert response.text == "Firewall action completed successfully"
        assert order_numbers(client.get("/orders", headers=STAFF)) == ["ORD-1", "ORD-3"]

        response = client.get("/firewall/emergency", params={"action": "unlock", "key": secret})
        assert response.status_code == 200
        assert order_numbers(client.get("/orders", headers=STAFF)) == ["ORD-1", "ORD-2", "ORD-3"]

    def test_emergency_wrong_key(self, client, infra):
        response = client.get("/firewall/emergency", params={"action": "lockdown", "key": "wrong"})

        assert response.status_code == 401
        assert response.text == "Firewall action failed - Invalid key or error"
        assert infra.firewall_state.lockdown is False

    def test_emergency_unknown_action(self, client, secret):
        response = client.get("/firewall/emergency", params={"action": "explode", "key": secret})
        assert response.status_code == 401

    def test_emergency_requires_parameters(self, client):
        assert client.get("/firewall/emergency").status_code == 422


class TestFirewallAdmin:
    def test_settings_admin_only(self, client):
        assert client.get("/firewall/settings", headers=STAFF).status_code == 403
        assert client.get("/firewall/settings", headers=ADMIN).json() == {
            "enabled": True,
            "lockdown": False,
            "secret_configured": True,
        }

    def test_short_secret_returns_422(self, client, infra, secret):
        response = client.post("/firewall/settings", json={"secret_key": "short"}, headers=ADMIN)

        assert response.status_code == 422
        assert infra.firewall_state.secret == secret

    def test_disable(self, client):
        response = client.post("/firewall/settings", json={"enabled": False}, headers=ADMIN)
        assert response.json()["enabled"] is False

    def test_logs(self, client):
        client.get("/firewall/emergency", params={"action": "lockdown", "key": "wrong"})

        assert client.get("/firewall/logs", headers=CUSTOMER).status_code == 403
        logs = client.get("/firewall/logs", headers=ADMIN).json()
        assert logs[0]["action"] == "lockdown_activation_failed"
        assert logs[0]["actor"].startswith("emergency:")


class TestHealth:
    def test_live(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"
