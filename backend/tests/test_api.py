"""
Integration tests for API endpoints.
"""
import pytest
import uuid
from fastapi.testclient import TestClient
from main import app


ROWS = [
    {"region": "North", "month": "2024-01-01", "product": "Widget", "sales": 10},
    {"region": "South", "month": "2024-01-01", "product": "Gadget", "sales": 4},
    {"region": "North", "month": "2024-02-01", "product": "Gadget", "sales": "oops"},
    {"region": "South", "month": "2024-02-01", "product": "Widget", "sales": 6},
]


@pytest.fixture
def client():
    """Create a test client."""
    return TestClient(app)


@pytest.fixture
def dataset_id(client):
    response = client.post("/api/datasets", json={"rows": ROWS})
    assert response.status_code == 200
    return response.json()["dataset_id"]


@pytest.mark.integration
def test_health_check(client):
    """Test the health check endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.integration
def test_root_endpoint(client):
    """Test the root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


@pytest.mark.integration
def test_chart_types(client):
    """Test the chart-type catalogue endpoint."""
    response = client.get("/api/chart-types")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 19
    assert data[-1]["key"] == "waterfall"
    assert data[-1]["display_name"] == "Waterfall Chart"


@pytest.mark.integration
def test_create_dataset(client):
    """Test loading a dataset classifies its columns."""
    response = client.post("/api/datasets", json={"rows": ROWS})

    assert response.status_code == 200
    data = response.json()
    assert data["row_count"] == 4
    assert data["headers"] == ["region", "month", "product", "sales"]
    assert data["column_types"] == {
        "region": "categorical",
        "month": "date",
        "product": "categorical",
        "sales": "categorical",
    }
    assert data["default_roles"]["x_col"] == "region"
    assert data["default_roles"]["y_col"] is None


@pytest.mark.integration
def test_create_empty_dataset(client):
    """Test that an empty dataset is rejected."""
    response = client.post("/api/datasets", json={"rows": []})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "DATASET_EMPTY"


@pytest.mark.integration
def test_get_and_delete_dataset(client, dataset_id):
    """Test reading and discarding a dataset."""
    assert client.get(f"/api/datasets/{dataset_id}").status_code == 200

    assert client.delete(f"/api/datasets/{dataset_id}").status_code == 200
    response = client.get(f"/api/datasets/{dataset_id}")
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "DATASET_NOT_FOUND"


@pytest.mark.integration
def test_create_chart(client, dataset_id):
    """Test computing a chart with a non-numeric value warning."""
    response = client.post(
        f"/api/datasets/{dataset_id}/charts",
        json={"chart_type": "bar", "x_col": "region", "y_col": "sales", "aggregation": "sum"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["chart"]["labels"] == ["North", "South"]
    assert data["chart"]["series"][0]["data"] == [10, 10]
    assert data["chart"]["title"] == "Vertical Bar: sales by region"
    assert len(data["warnings"]) == 1
    assert '"sales"' in data["warnings"][0]


@pytest.mark.integration
def test_create_grouped_chart(client, dataset_id):
    """Test a percentage-stacked chart through the API."""
    response = client.post(
        f"/api/datasets/{dataset_id}/charts",
        json={
            "chart_type": "percentageStackedBar",
            "x_col": "region",
            "y_col": "sales",
            "group_by_col": "product",
        }
    )

    chart = response.json()["chart"]
    assert chart["labels"] == ["North", "South"]
    assert [s["label"] for s in chart["series"]] == ["Gadget", "Widget"]
    assert chart["series"][0]["data"] == pytest.approx([0, 40])
    assert chart["series"][1]["data"] == pytest.approx([100, 60])
    assert chart["axes"]["percentage"] is True


@pytest.mark.integration
def test_invalid_selection_returns_no_chart(client, dataset_id):
    """Test that a placeholder selection yields no chart."""
    response = client.post(
        f"/api/datasets/{dataset_id}/charts",
        json={"chart_type": "groupedBar", "x_col": "region", "y_col": "sales",
              "group_by_col": "(Select Column)"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["chart"] is None
    assert data["reason"]


@pytest.mark.integration
def test_unknown_chart_type(client, dataset_id):
    """Test that unknown chart types are rejected by validation."""
    response = client.post(
        f"/api/datasets/{dataset_id}/charts",
        json={"chart_type": "pie", "x_col": "region", "y_col": "sales"}
    )
    assert response.status_code == 422


@pytest.mark.integration
def test_correlation_id_header(client):
    """Test that correlation ID is returned in response headers."""
    correlation_id = str(uuid.uuid4())
    response = client.get("/api/health", headers={"X-Correlation-ID": correlation_id})

    assert response.headers["X-Correlation-ID"] == correlation_id


@pytest.mark.integration
def test_correlation_id_generated(client):
    """Test that correlation ID is generated if not provided."""
    response = client.get("/api/health")
    uuid.UUID(response.headers["X-Correlation-ID"])


@pytest.mark.integration
def test_metrics_endpoint(client, dataset_id):
    """Test the metrics endpoint reports engine timings."""
    client.post(
        f"/api/datasets/{dataset_id}/charts",
        json={"chart_type": "waterfall", "x_col": "month", "y_col": "sales"}
    )
    data = client.get("/api/metrics").json()

    assert "build_chart" in data["performance"]
    assert data["datasets"]["size"] >= 1
