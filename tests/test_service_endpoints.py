import pytest

try:
    from fastapi.testclient import TestClient  # type: ignore
    from quantrank.service import build_app  # type: ignore
    FASTAPI_AVAILABLE = True
except Exception:  # pragma: no cover - optional dependency missing
    FASTAPI_AVAILABLE = False


pytestmark = pytest.mark.skipif(not FASTAPI_AVAILABLE, reason="fastapi extra not installed")


def _client():
    app = build_app()
    return TestClient(app)


def test_quantiles_linear_floats():
    client = _client()
    r = client.post("/quantiles", json={"values": [4.0, 1.0, 3.0, 2.0], "fractions": [0.5, 1.0]})
    assert r.status_code == 200
    data = r.json()
    assert data["results"] == [2.5, 4.0]
    assert data["interpolation"] == "linear"
    assert data["tier"] == "FixedWidthNumber(float64)"


def test_quantiles_decimal_results_are_strings():
    client = _client()
    r = client.post(
        "/quantiles",
        json={"values": ["0.1", "0.2"], "fractions": [0.5], "tier": "decimal"},
    )
    assert r.status_code == 200
    assert r.json()["results"] == ["0.15"]


def test_strings_default_to_lower():
    client = _client()
    r = client.post("/quantiles", json={"values": ["pear", "apple", "fig", "kiwi"], "fractions": [0.5]})
    assert r.status_code == 200
    data = r.json()
    assert data["interpolation"] == "lower"
    assert data["results"] == ["fig"]


def test_invalid_fraction_is_422():
    client = _client()
    r = client.post("/quantiles", json={"values": [1.0, 2.0], "fractions": [0.5, 1.5]})
    assert r.status_code == 422
    assert "[0.0, 1.0]" in r.json()["detail"]


def test_linear_on_strings_is_422():
    client = _client()
    r = client.post(
        "/quantiles",
        json={"values": ["a", "b"], "fractions": [0.5], "interpolation": "linear"},
    )
    assert r.status_code == 422
    assert "LINEAR" in r.json()["detail"]


def test_median_and_empty_values():
    client = _client()
    r = client.post("/median", json={"values": [5.0, 1.0, 3.0]})
    assert r.status_code == 200
    assert r.json()["result"] == 3.0
    r2 = client.post("/median", json={"values": []})
    assert r2.status_code == 200
    assert r2.json()["result"] is None


def test_healthz():
    client = _client()
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_declared_float_tier_parses_strings():
    client = _client()
    r = client.post(
        "/quantiles",
        json={"values": ["10", "9", "100"], "fractions": [0.0, 1.0], "tier": "float64"},
    )
    assert r.status_code == 200
    assert r.json()["results"] == [9.0, 100.0]


def test_declared_int_tier_rejects_fractional_values():
    client = _client()
    r = client.post("/quantiles", json={"values": [1.5, 2.9], "fractions": [0.5], "tier": "int32"})
    assert r.status_code == 422
    assert "values[0]" in r.json()["detail"]
    ok = client.post("/quantiles", json={"values": [1, 4], "fractions": [0.5], "tier": "int32"})
    assert ok.status_code == 200
    assert ok.json()["results"] == [2.5]


def test_declared_str_tier_orders_as_text():
    client = _client()
    r = client.post("/quantiles", json={"values": [10, 9, 100], "fractions": [0.0, 1.0], "tier": "str"})
    assert r.status_code == 200
    assert r.json()["results"] == ["10", "9"]


def test_declared_timedelta_tier_orders_by_duration():
    client = _client()
    r = client.post(
        "/quantiles",
        json={"values": ["10:00:00", "9:00:00", "8:00:00"], "fractions": [0.0, 1.0], "tier": "timedelta"},
    )
    assert r.status_code == 200
    assert r.json()["results"] == ["8:00:00", "10:00:00"]


def test_unparseable_value_is_422():
    client = _client()
    r = client.post("/median", json={"values": ["1.0", "oops"], "tier": "float64"})
    assert r.status_code == 422
    assert "values[1]" in r.json()["detail"]
