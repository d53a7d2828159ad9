"""Testes HTTP dos endpoints de pagamentos."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

from api.payload_builders.pix import verify_br_code
from tests.fakes.fake_payment_provider import FakePaymentProvider

CARD = {"number": "4111111111111111", "exp_month": 12, "exp_year": 2030, "cvv": "123"}


class TestCreate:
    def test_pix_created_with_location_and_idempotency_status(self, make_client) -> None:
        client = make_client()

        response = client.post("/payments/pix", json={"amount": 12.34}, headers={"Idempotency-Key": "pedido-1"})

        assert response.status_code == 201
        body = response.json()
        assert body["ok"] is True
        transaction = body["transaction"]
        assert response.headers["Location"] == f"/payments/{transaction['id']}"
        assert response.headers["Idempotency-Status"] == "created"
        assert transaction["status"] == "pending"
        assert transaction["provider"] == "static_pix"
        assert transaction["amount_cents"] == 1234
        assert verify_br_code(transaction["metadata"]["pix"]["qr_code"])

    def test_replay_returns_200_with_same_transaction(self, make_client) -> None:
        client = make_client()
        headers = {"Idempotency-Key": "pedido-2"}

        first = client.post("/payments", json={"method": "pix", "amount_cents": 500}, headers=headers)
        second = client.post("/payments", json={"method": "pix", "amount_cents": 999}, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.headers["Idempotency-Status"] == "replayed"
        assert second.json()["transaction"]["id"] == first.json()["transaction"]["id"]
        assert second.json()["transaction"]["amount_cents"] == 500

    def test_without_key_has_no_idempotency_status(self, make_client) -> None:
        response = make_client().post("/payments", json={"method": "pix", "amount_cents": 500})

        assert response.status_code == 201
        assert "Idempotency-Status" not in response.headers

    def test_card_route_in_sandbox(self, make_client) -> None:
        client = make_client(sandbox=True)

        response = client.post("/payments/card", json={"amount_cents": 9999, "card": CARD, "capture": False})

        transaction = response.json()["transaction"]
        assert response.status_code == 201
        assert transaction["provider"] == "mock"
        assert transaction["status"] == "authorized"
        assert transaction["method_details"]["last4"] == "1111"
        assert "card" not in transaction

    def test_mode_header_routes_to_live_gateway(self, make_client, registry) -> None:
        registry.register(FakePaymentProvider(name="mercadopago"))
        client = make_client()

        response = client.post("/payments/pix", json={"amount_cents": 100}, headers={"X-Axion-Mode": "black"})

        transaction = response.json()["transaction"]
        assert transaction["provider"] == "mercadopago"
        assert transaction["metadata"]["operation_mode"] == "black"

    def test_missing_method(self, make_client) -> None:
        response = make_client().post("/payments", json={"amount_cents": 100})

        assert response.status_code == 400
        assert response.json() == {"ok": False, "error": 'Campo "method" e obrigatorio.', "code": "invalid_request"}

    def test_invalid_method(self, make_client) -> None:
        response = make_client().post("/payments", json={"method": "boleto", "amount_cents": 100})

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_method"

    def test_card_without_card_data(self, make_client) -> None:
        response = make_client().post("/payments/card", json={"amount_cents": 100})

        assert response.status_code == 400
        assert "card" in response.json()["error"]

    def test_invalid_json(self, make_client) -> None:
        response = make_client().post(
            "/payments",
            content=b"{nope",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_request"

    def test_provider_transport_failure_is_502(self, make_client, registry) -> None:
        registry.register(FakePaymentProvider(name="woovi", charge_error=True))

        response = make_client().post("/payments/card", json={"amount_cents": 100, "card": CARD})

        assert response.status_code == 502
        assert response.json()["code"] == "internal_error"


class TestLifecycle:
    def test_capture_then_capture_again(self, make_client) -> None:
        client = make_client(sandbox=True)
        created = client.post("/payments/card", json={"amount_cents": 9999, "card": CARD, "capture": "false"})
        transaction_id = created.json()["transaction"]["id"]

        captured = client.post(f"/payments/{transaction_id}/capture")
        again = client.post(f"/payments/{transaction_id}/capture")

        assert captured.status_code == 200
        assert captured.json()["transaction"]["status"] == "paid"
        assert again.status_code == 409
        assert again.json()["code"] == "invalid_status"

    def test_confirm_pix(self, make_client) -> None:
        client = make_client()
        transaction_id = client.post("/payments/pix", json={"amount_cents": 100}).json()["transaction"]["id"]

        response = client.post(f"/payments/{transaction_id}/confirm")

        assert response.status_code == 200
        assert response.json()["transaction"]["status"] == "paid"

    def test_cancel_and_unknown(self, make_client) -> None:
        client = make_client()
        transaction_id = client.post("/payments/pix", json={"amount_cents": 100}).json()["transaction"]["id"]

        assert client.post(f"/payments/{transaction_id}/cancel").json()["transaction"]["status"] == "canceled"
        missing = client.post("/payments/tx_inexistente/cancel")
        assert missing.status_code == 404
        assert missing.json()["code"] == "not_found"

    def test_refund_rules(self, make_client) -> None:
        client = make_client(sandbox=True)
        transaction_id = client.post("/payments/card", json={"amount_cents": 1000, "card": CARD}).json()[
            "transaction"
        ]["id"]

        too_much = client.post(f"/payments/{transaction_id}/refund", json={"amount_cents": 5000})
        partial = client.post(f"/payments/{transaction_id}/refund", json={"amount": "2.50"})
        again = client.post(f"/payments/{transaction_id}/refund")

        assert too_much.status_code == 400
        assert too_much.json()["code"] == "insufficient_amount"
        assert partial.status_code == 200
        assert partial.json()["transaction"]["metadata"]["refund"] == {"amount_cents": 250}
        assert again.status_code == 409

    def test_metadata_patch(self, make_client) -> None:
        client = make_client()
        transaction_id = client.post("/payments/pix", json={"amount_cents": 100}).json()["transaction"]["id"]

        ok = client.patch(f"/payments/{transaction_id}/metadata", json={"metadata": {"nota": "x", "cvv": "1"}})
        bad = client.patch(f"/payments/{transaction_id}/metadata", json={"metadata": "x"})

        assert ok.status_code == 200
        assert ok.json()["transaction"]["metadata"]["nota"] == "x"
        assert ok.json()["transaction"]["metadata"]["cvv"] == "***"
        assert bad.status_code == 400


class TestQueries:
    def _seed(self, client) -> list[dict]:
        created = [
            client.post("/payments/pix", json={"amount_cents": 100}).json()["transaction"],
            client.post("/payments/card", json={"amount_cents": 200, "card": CARD}).json()["transaction"],
        ]
        return created

    def test_get_and_events(self, make_client) -> None:
        client = make_client(sandbox=True)
        pix, _ = self._seed(client)

        fetched = client.get(f"/payments/{pix['id']}")
        events = client.get(f"/payments/{pix['id']}/events")

        assert fetched.json()["transaction"]["id"] == pix["id"]
        assert events.status_code == 200
        assert events.json()["events"][-1]["type"] == "payment_created"
        assert client.get("/payments/tx_nada").status_code == 404

    def test_list_with_pagination_and_filters(self, make_client) -> None:
        client = make_client(sandbox=True)
        self._seed(client)

        page = client.get("/payments", params={"limit": 1}).json()
        by_method = client.get("/payments", params={"method": "PIX"}).json()
        bad_limit = client.get("/payments", params={"limit": "abc"}).json()

        assert page["total"] == 2
        assert page["count"] == 1
        assert by_method["total"] == 1
        assert bad_limit["limit"] == 50

    def test_invalid_date_filter(self, make_client) -> None:
        response = make_client().get("/payments", params={"created_from": "ontem"})

        assert response.status_code == 400
        assert "created_from" in response.json()["error"]

    def test_date_only_filters_are_treated_as_utc(self, make_client) -> None:
        client = make_client(sandbox=True)
        self._seed(client)

        since = client.get("/payments", params={"created_from": "2020-01-01"})
        until = client.get("/payments", params={"created_to": "2020-01-01T00:00:00"})

        assert since.status_code == 200
        assert since.json()["total"] == 2
        assert until.status_code == 200
        assert until.json()["total"] == 0

    def test_status_method_provider_and_stats(self, make_client) -> None:
        client = make_client(sandbox=True)
        pix, card = self._seed(client)

        by_status = client.get("/payments/status/paid").json()
        by_method = client.get("/payments/method/card").json()
        by_reference = client.get(f"/payments/provider/{pix['provider_reference']}").json()
        stats = client.get("/payments/stats").json()

        assert [tx["id"] for tx in by_status["transactions"]] == [card["id"]]
        assert by_method["total"] == 1
        assert by_reference["transaction"]["id"] == pix["id"]
        assert stats["ok"] is True
        assert stats["stats"]["total"] == 2


class TestErrorHandling:
    def test_correlation_id_is_echoed(self, make_client) -> None:
        response = make_client().get("/payments", headers={"X-Correlation-Id": "req-123"})
        assert response.headers["X-Correlation-Id"] == "req-123"

    def test_unexpected_error_is_500(self, make_client) -> None:
        services = SimpleNamespace(queries=SimpleNamespace(stats=AsyncMock(side_effect=RuntimeError("boom"))))
        client = make_client(services=services, raise_server_exceptions=False)

        response = client.get("/payments/stats")

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "Erro interno.", "code": "internal_error"}
