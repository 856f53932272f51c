"""Endpoint tests for the /api/sideshift proxy routes."""

import httpx
import pytest

from app.api.routes_sideshift import normalize_amount
from app.core.config import Settings


class TestCoinsAndPairs:
    def test_coins_passthrough(self, client, upstream) -> None:
        upstream.handler = lambda request: httpx.Response(200, json=[{"coin": "BTC"}])

        resp = client.get("/api/sideshift/coins")

        assert resp.status_code == 200
        assert resp.json() == [{"coin": "BTC"}]
        assert str(upstream.last.url) == "https://sideshift.ai/api/v2/coins"
        # public endpoint still carries the secret when configured
        assert upstream.last.headers["x-sideshift-secret"] == "ss-secret"

    def test_coins_without_secret_configured(self, make_client, upstream) -> None:
        upstream.handler = lambda request: httpx.Response(200, json=[])
        client = make_client(Settings())

        resp = client.get("/api/sideshift/coins")

        assert resp.status_code == 200
        assert "x-sideshift-secret" not in upstream.last.headers

    def test_pairs_forwards_query(self, client, upstream) -> None:
        upstream.handler = lambda request: httpx.Response(200, json=[{"rate": "1.0"}])

        resp = client.get("/api/sideshift/pairs", params={"depositCoin": "btc", "settleCoin": "eth"})

        assert resp.status_code == 200
        assert upstream.last.url.params["depositCoin"] == "btc"
        assert upstream.last.url.params["settleCoin"] == "eth"

    def test_pairs_omits_missing_query(self, client, upstream) -> None:
        client.get("/api/sideshift/pairs")
        assert "depositCoin" not in upstream.last.url.params

    def test_upstream_error_keeps_status(self, client, upstream) -> None:
        upstream.handler = lambda request: httpx.Response(
            503, json={"error": {"message": "Maintenance"}}
        )

        resp = client.get("/api/sideshift/coins")

        assert resp.status_code == 503
        assert resp.json() == {"error": "Maintenance", "details": {"error": {"message": "Maintenance"}}}

    def test_upstream_text_error(self, client, upstream) -> None:
        upstream.handler = lambda request: httpx.Response(
            502, text="bad gateway", headers={"content-type": "text/plain"}
        )

        resp = client.get("/api/sideshift/coins")

        assert resp.status_code == 502
        assert resp.json() == {"error": "bad gateway", "details": "bad gateway"}

    def test_upstream_unreachable(self, client, upstream) -> None:
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        upstream.handler = handler

        resp = client.get("/api/sideshift/coins")

        assert resp.status_code == 500
        assert "error" in resp.json()


class TestQuotes:
    def test_missing_settle_coin(self, client, upstream) -> None:
        resp = client.post("/api/sideshift/quotes", json={"depositCoin": "btc"})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing or invalid `settleCoin`."}
        assert upstream.requests == []

    def test_missing_deposit_coin(self, client) -> None:
        resp = client.post("/api/sideshift/quotes", json={"settleCoin": "eth", "depositAmount": "1"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing or invalid `depositCoin`."}

    def test_wrong_type_coin(self, client) -> None:
        resp = client.post("/api/sideshift/quotes", json={"depositCoin": 5, "settleCoin": "eth"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Missing or invalid `depositCoin`."

    def test_missing_both_amounts(self, client) -> None:
        resp = client.post("/api/sideshift/quotes", json={"depositCoin": "btc", "settleCoin": "eth"})

        assert resp.status_code == 400
        assert resp.json()["error"].startswith("Provide either")

    def test_empty_amounts_count_as_missing(self, client) -> None:
        resp = client.post(
            "/api/sideshift/quotes",
            json={"depositCoin": "btc", "settleCoin": "eth", "depositAmount": "", "settleAmount": None},
        )
        assert resp.status_code == 400

    def test_invalid_amount_type(self, client) -> None:
        resp = client.post(
            "/api/sideshift/quotes",
            json={"depositCoin": "btc", "settleCoin": "eth", "depositAmount": True},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Amounts must be provided as string or number values."

    def test_invalid_json_body(self, client) -> None:
        resp = client.post(
            "/api/sideshift/quotes",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid JSON body."}

    def test_non_object_body(self, client) -> None:
        resp = client.post("/api/sideshift/quotes", json=["btc"])
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid JSON body."}

    def test_forwards_normalized_quote(self, client, upstream) -> None:
        upstream.handler = lambda request: httpx.Response(200, json={"id": "q1"})

        resp = client.post(
            "/api/sideshift/quotes",
            json={"depositCoin": "btc", "settleCoin": "eth", "depositAmount": 0.5, "depositNetwork": "bitcoin"},
        )

        assert resp.status_code == 200
        assert resp.json() == {"id": "q1"}
        sent = upstream.last_json()
        assert sent == {
            "depositCoin": "btc",
            "settleCoin": "eth",
            "depositAmount": "0.5",
            "depositNetwork": "bitcoin",
            "affiliateId": "aff-1",
        }
        assert upstream.last.method == "POST"
        assert str(upstream.last.url) == "https://sideshift.ai/api/v2/quotes"
        assert upstream.last.headers["x-sideshift-secret"] == "ss-secret"

    def test_integer_amount_normalized(self, client, upstream) -> None:
        client.post("/api/sideshift/quotes", json={"depositCoin": "btc", "settleCoin": "eth", "settleAmount": 100})
        assert upstream.last_json()["settleAmount"] == "100"
        assert "depositAmount" not in upstream.last_json()

    def test_caller_affiliate_kept(self, client, upstream) -> None:
        client.post(
            "/api/sideshift/quotes",
            json={"depositCoin": "btc", "settleCoin": "eth", "depositAmount": "1", "affiliateId": "mine"},
        )
        assert upstream.last_json()["affiliateId"] == "mine"

    def test_no_affiliate_configured(self, make_client, upstream) -> None:
        client = make_client(Settings(sideshift_secret="ss-secret"))
        client.post("/api/sideshift/quotes", json={"depositCoin": "btc", "settleCoin": "eth", "depositAmount": "1"})
        assert "affiliateId" not in upstream.last_json()

    def test_missing_secret(self, make_client, upstream) -> None:
        client = make_client(Settings())

        resp = client.post(
            "/api/sideshift/quotes",
            json={"depositCoin": "btc", "settleCoin": "eth", "depositAmount": "1"},
        )

        assert resp.status_code == 500
        assert "SIDESHIFT_SECRET" in resp.json()["error"]
        assert upstream.requests == []

    def test_upstream_rejection(self, client, upstream) -> None:
        payload = {"error": {"message": "Amount too low"}}
        upstream.handler = lambda request: httpx.Response(400, json=payload)

        resp = client.post(
            "/api/sideshift/quotes",
            json={"depositCoin": "btc", "settleCoin": "eth", "depositAmount": "0.00001"},
        )

        assert resp.status_code == 400
        assert resp.json() == {"error": "Amount too low", "details": payload}


class TestFixedShifts:
    @pytest.mark.parametrize(
        "body,field",
        [
            ({"settleAddress": "0xabc"}, "quoteId"),
            ({"quoteId": "q1"}, "settleAddress"),
            ({"quoteId": 1, "settleAddress": "0xabc"}, "quoteId"),
        ],
    )
    def test_validation(self, client, body, field) -> None:
        resp = client.post("/api/sideshift/shifts/fixed", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": f"Missing or invalid `{field}`."}

    def test_forwards_shift(self, client, upstream) -> None:
        upstream.handler = lambda request: httpx.Response(200, json={"id": "shift-1"})

        resp = client.post(
            "/api/sideshift/shifts/fixed",
            json={"quoteId": "q1", "settleAddress": "0xabc", "refundAddress": "bc1q"},
        )

        assert resp.status_code == 200
        assert resp.json() == {"id": "shift-1"}
        assert upstream.last_json() == {
            "quoteId": "q1",
            "settleAddress": "0xabc",
            "refundAddress": "bc1q",
            "affiliateId": "aff-1",
        }
        assert str(upstream.last.url) == "https://sideshift.ai/api/v2/shifts/fixed"


class TestShiftStatus:
    def test_status(self, client, upstream) -> None:
        upstream.handler = lambda request: httpx.Response(200, json={"id": "abc", "status": "waiting"})

        resp = client.get("/api/sideshift/shifts/abc")

        assert resp.status_code == 200
        assert resp.json()["status"] == "waiting"
        assert upstream.last.url.path == "/api/v2/shifts/abc"
        assert upstream.last.headers["x-sideshift-secret"] == "ss-secret"

    def test_blank_shift_id(self, client, upstream) -> None:
        resp = client.get("/api/sideshift/shifts/%20")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Missing or invalid shift ID."}
        assert upstream.requests == []

    def test_status_requires_secret(self, make_client) -> None:
        client = make_client(Settings())
        resp = client.get("/api/sideshift/shifts/abc")
        assert resp.status_code == 500

    def test_not_found_upstream(self, client, upstream) -> None:
        upstream.handler = lambda request: httpx.Response(404, json={"error": {"message": "Shift not found"}})
        resp = client.get("/api/sideshift/shifts/missing")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Shift not found"


class TestAmountFormatting:
    """Numeric amounts are stringified the way a JavaScript client would."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (100, "100"),
            (100.0, "100"),
            (0.5, "0.5"),
            (123.456, "123.456"),
            (-2.5, "-2.5"),
            (0.000001, "0.000001"),
            (1e-7, "1e-7"),
            (1.5e-7, "1.5e-7"),
            (1e16, "10000000000000000"),
            (1e21, "1e+21"),
            (-0.0, "0"),
            ("0.25", "0.25"),
            (None, None),
        ],
    )
    def test_normalize_amount(self, value, expected) -> None:
        assert normalize_amount(value) == expected

    def test_tiny_amount_forwarded_in_exponent_form(self, client, upstream) -> None:
        client.post(
            "/api/sideshift/quotes",
            json={"depositCoin": "btc", "settleCoin": "eth", "depositAmount": 1e-7},
        )
        assert upstream.last_json()["depositAmount"] == "1e-7"
