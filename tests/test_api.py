from datetime import datetime, timedelta, timezone

from pricer_setter.auth import TokenService


def test_health_is_public(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_protected_routes_require_a_token(client):
    assert client.get("/api/quotations").status_code == 401
    assert client.get("/api/pricing-data", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_tokens_signed_with_another_key_are_rejected(client):
    forged = TokenService("other-secret").issue("access-code")
    response = client.get("/api/quotations", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == 401


def test_expired_tokens_are_rejected(client):
    stale = TokenService("test-secret", ttl_minutes=5).issue(
        "access-code", now=datetime.now(timezone.utc) - timedelta(hours=1)
    )
    response = client.get("/api/quotations", headers={"Authorization": f"Bearer {stale}"})
    assert response.status_code == 401


def test_login_validation(client):
    assert client.post("/api/auth/login", json={}).status_code == 400
    assert client.post("/api/auth/login", json={"code": "wrong"}).status_code == 401


def test_analyze_short_requirement(client, auth_headers, fake_llm):
    response = client.post(
        "/api/analyze", json={"requirement": "tiny", "isStudent": False}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "insufficient_info"
    assert body["modules"] == []
    assert body["total"] == 0
    assert fake_llm.calls == []


def test_analyze_returns_priced_modules(client, auth_headers, fake_llm):
    response = client.post(
        "/api/analyze",
        json={"requirement": "Gym member portal with login and dashboard", "isStudent": False},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["total"] == sum(module["price"] for module in body["modules"])
    # Seeded starter catalog prices these modules.
    assert [module["price"] for module in body["modules"]] == [190, 100]
    assert body["isStudent"] is False
    assert body["similar_project"] is False
    assert "Quotation Date: 19 October 2026" in body["quotation_template"]
    # No saved patterns yet, so similarity never reaches the provider.
    assert fake_llm.count("similarity") == 0


def test_analyze_failure_returns_500(client, auth_headers, fake_llm):
    fake_llm.classification_error = RuntimeError("upstream timeout")
    response = client.post(
        "/api/analyze",
        json={"requirement": "Gym member portal with login and dashboard"},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json() == {
        "status": "error",
        "message": "upstream timeout",
        "modules": [],
        "total": 0,
    }


def test_save_flow_enables_similarity(client, auth_headers, fake_llm):
    analysis = client.post(
        "/api/analyze",
        json={"requirement": "Gym member portal with login and dashboard"},
        headers=auth_headers,
    ).json()

    saved = client.post(
        "/api/quotations",
        json={
            "projectTitle": analysis["project_title"],
            "modules": analysis["modules"],
            "total": analysis["total"],
            "quotationText": analysis["quotation_template"],
            "isStudent": False,
        },
        headers=auth_headers,
    )
    assert saved.status_code == 200
    assert saved.json()["success"] is True

    pattern = client.post(
        "/api/patterns",
        json={
            "projectTitle": analysis["project_title"],
            "description": analysis["summary"],
            "modules": analysis["modules"],
            "totalPrice": analysis["total"],
            "keywords": analysis["keywords"],
            "isStudent": False,
        },
        headers=auth_headers,
    )
    assert pattern.status_code == 200
    pattern_id = pattern.json()["id"]

    fake_llm.similarity = {"similar": True, "matchedProjectId": pattern_id, "similarity_score": 95}
    again = client.post(
        "/api/analyze",
        json={"requirement": "Another gym portal with login"},
        headers=auth_headers,
    ).json()

    assert again["similar_project"] is True
    assert again["matched_project_id"] == pattern_id
    assert fake_llm.count("similarity") == 1


def test_quotation_lifecycle(client, auth_headers):
    created = client.post(
        "/api/quotations",
        json={
            "projectTitle": "Shop",
            "modules": [{"name": "Cart", "level": "medium", "price": 280}],
            "total": 280,
            "quotationText": "QUOTATION",
        },
        headers=auth_headers,
    ).json()
    quotation_id = created["id"]

    record = client.get(f"/api/quotations/{quotation_id}", headers=auth_headers).json()
    assert record["status"] == "draft"
    assert record["total_price"] == 280
    assert record["modules"][0]["name"] == "Cart"

    response = client.patch(
        f"/api/quotations/{quotation_id}/status", json={"status": "approved"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get(f"/api/quotations/{quotation_id}", headers=auth_headers).json()["status"] == "approved"

    listing = client.get("/api/quotations", headers=auth_headers).json()
    assert [item["id"] for item in listing] == [quotation_id]


def test_unrecognised_status_is_stored_as_sent(client, auth_headers):
    quotation_id = client.post(
        "/api/quotations",
        json={"projectTitle": "Shop", "modules": [], "total": 0},
        headers=auth_headers,
    ).json()["id"]

    response = client.patch(
        f"/api/quotations/{quotation_id}/status", json={"status": "shipped"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get(f"/api/quotations/{quotation_id}", headers=auth_headers).json()["status"] == "shipped"
    listing = client.get("/api/quotations", headers=auth_headers).json()
    assert [item["status"] for item in listing] == ["shipped"]


def test_missing_quotation_is_404(client, auth_headers):
    assert client.get("/api/quotations/9999", headers=auth_headers).status_code == 404
    response = client.patch("/api/quotations/9999/status", json={"status": "rejected"}, headers=auth_headers)
    assert response.status_code == 404


def test_pricing_data_crud(client, auth_headers):
    payload = {
        "moduleName": "Booking Calendar",
        "complexityLevel": "medium",
        "basePrice": 210,
        "studentPrice": 95,
        "description": "Appointments",
    }
    created = client.post("/api/pricing-data", json=payload, headers=auth_headers)
    assert created.status_code == 200
    entry_id = created.json()["id"]

    entry = client.get(f"/api/pricing-data/{entry_id}", headers=auth_headers).json()
    assert entry["module_name"] == "Booking Calendar"
    assert entry["base_price"] == 210

    updated = client.put(
        f"/api/pricing-data/{entry_id}", json={**payload, "basePrice": 230}, headers=auth_headers
    )
    assert updated.json() == {"success": True}
    assert client.get(f"/api/pricing-data/{entry_id}", headers=auth_headers).json()["base_price"] == 230

    names = [item["module_name"] for item in client.get("/api/pricing-data", headers=auth_headers).json()]
    assert "Booking Calendar" in names

    assert client.delete(f"/api/pricing-data/{entry_id}", headers=auth_headers).json() == {"success": True}
    assert client.get(f"/api/pricing-data/{entry_id}", headers=auth_headers).status_code == 404
    assert client.delete(f"/api/pricing-data/{entry_id}", headers=auth_headers).status_code == 404
    assert client.put(f"/api/pricing-data/{entry_id}", json=payload, headers=auth_headers).status_code == 404


def test_pricing_data_rejects_unknown_level(client, auth_headers):
    response = client.post(
        "/api/pricing-data",
        json={"moduleName": "X", "complexityLevel": "extreme", "basePrice": 1, "studentPrice": 1},
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_analyze_student_pricing(client, auth_headers):
    body = client.post(
        "/api/analyze",
        json={"requirement": "Gym member portal with login and dashboard", "isStudent": True},
        headers=auth_headers,
    ).json()

    assert body["isStudent"] is True
    assert [module["price"] for module in body["modules"]] == [90, 45]
    assert "Client Type:    STUDENT" in body["quotation_template"]
