from checkout_router.config import RATE_LIMIT_TIMES
from checkout_router.errors import GENERIC_FAILURE_MESSAGE
from checkout_router.utils.rate_limit import RATE_LIMIT_MESSAGE


def test_paid_checkout_redirects_to_stripe(client, provider):
    res = client.get("/checkout", params={"sid": "sub-1", "services": "Interior Formatting — $149, COVER"})
    assert res.status_code == 303
    assert res.headers["location"] == provider.url
    assert res.headers["cache-control"].startswith("no-store")
    assert len(provider.calls) == 1
    assert provider.calls[0]["metadata"]["selected_service_skus"] == "INTFMT,COVER"


def test_free_checkout_redirects_to_thank_you(client, provider):
    res = client.get("/checkout", params={"sid": "sub-1", "services": "kdpprep"})
    assert res.status_code == 303
    assert res.headers["location"] == "https://example.test/thank-you?sid=sub-1&free=true"
    assert provider.calls == []


def test_query_values_are_trimmed(client, provider):
    res = client.get("/checkout", params={"sid": "  sub-1 ", "services": " COVER ", "email": " a@b.test "})
    assert res.status_code == 303
    call = provider.calls[0]
    assert call["metadata"]["project_intake_submission_id"] == "sub-1"
    assert call["customer_email"] == "a@b.test"


def test_missing_sid_is_400_json(client, provider):
    res = client.get("/checkout", params={"services": "INTFMT"})
    assert res.status_code == 400
    assert res.json() == {"detail": "Missing submission ID (sid parameter)", "error": "InvalidSubmissionId"}
    assert provider.calls == []


def test_no_services_is_400(client):
    res = client.get("/checkout", params={"sid": "sub-1"})
    assert res.status_code == 400
    assert res.json()["error"] == "NoServicesSelected"


def test_unknown_service_is_400_with_token(client):
    res = client.get("/checkout", params={"sid": "sub-1", "services": "Foo Bar"})
    assert res.status_code == 400
    assert res.json() == {"detail": "Unknown service: Foo Bar", "error": "UnknownService"}


def test_too_long_services_is_400(client):
    res = client.get("/checkout", params={"sid": "sub-1", "services": "COVER," * 100})
    assert res.status_code == 400
    assert res.json()["error"] == "InputTooLong"


def test_browser_gets_plain_text_error(client):
    res = client.get("/checkout", params={"services": "INTFMT"}, headers={"Accept": "text/html,*/*"})
    assert res.status_code == 400
    assert res.headers["content-type"].startswith("text/plain")
    assert res.text == "Missing submission ID (sid parameter)"


def test_provider_failure_is_generic_500(client, provider):
    provider.fail = True
    res = client.get("/checkout", params={"sid": "sub-1", "services": "COVER"})
    assert res.status_code == 500
    assert res.json() == {"detail": GENERIC_FAILURE_MESSAGE, "error": "PaymentSessionError"}
    assert "outage" not in res.text


def test_unknown_route_lists_endpoints(client):
    res = client.get("/does-not-exist")
    assert res.status_code == 404
    body = res.json()
    assert body["error"] == "Not Found"
    assert body["availableEndpoints"] == ["/health", "/checkout"]


def test_security_headers_present(client):
    res = client.get("/health")
    assert res.headers["x-content-type-options"] == "nosniff"
    assert res.headers["x-frame-options"] == "DENY"


def test_checkout_is_rate_limited_per_client(client, provider, monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    params = {"sid": "sub-1", "services": "kdpprep"}

    for _ in range(RATE_LIMIT_TIMES):
        assert client.get("/checkout", params=params).status_code == 303

    res = client.get("/checkout", params=params)
    assert res.status_code == 429
    assert res.json() == {"detail": RATE_LIMIT_MESSAGE}
    assert int(res.headers["retry-after"]) >= 1
    assert provider.calls == []
