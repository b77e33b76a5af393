"""
Basic unit tests to verify the app setup.
"""


def test_app_creation(app):
    """Test that the app can be created."""
    assert app is not None
    assert app.title == "Study Planner"


def test_health_endpoint(client):
    """Test the health endpoint without authentication."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_study_plans_require_auth(client):
    """Listing plans without a token is rejected."""
    response = client.get("/v1/study-plans")
    assert response.status_code == 401


def test_study_plans_with_auth(auth_client):
    """Test study plans endpoint with authentication."""
    response = auth_client.get("/v1/study-plans")
    assert response.status_code == 200
    data = response.json()
    assert data["items"] == []


def test_error_envelope_documented(app):
    """Routers advertise the error envelope in the OpenAPI schema."""
    schema = app.openapi()
    assert "ErrorResponse" in schema["components"]["schemas"]
    responses = schema["paths"]["/v1/study-plans/{plan_id}"]["get"]["responses"]
    assert responses["404"]["content"]["application/json"]["schema"] == {
        "$ref": "#/components/schemas/ErrorResponse"
    }
