from __future__ import annotations

from fastapi.testclient import TestClient

from api.main import create_app
from config import Settings


def _client(**overrides) -> TestClient:
    return TestClient(create_app(Settings(**overrides)))


def test_calculate_returns_result_and_steps():
    with _client() as client:
        response = client.post("/calculate", json={"expression": "2 + 3 * 4", "type": "basic"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["result"] == 14
    assert body["expression"] == "2 + 3 * 4"
    assert body["steps"] == ["3 * 4 = 12", "2 + 12 = 14"]


def test_calculate_eval_error_maps_to_422():
    with _client() as client:
        response = client.post("/calculate", json={"expression": "10 / 0", "type": "basic"})

    assert response.status_code == 422
    assert response.json() == {
        "success": False,
        "error": {"kind": "EvalError", "message": "division by zero", "position": 3},
    }


def test_calculate_parse_error_maps_to_400():
    with _client() as client:
        response = client.post("/calculate", json={"expression": "(2 + 3", "type": "basic"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["kind"] == "ParseError"
    assert error["message"] == "unbalanced parentheses"
    assert error["position"] == 0


def test_calculate_scientific_function_rejected_in_basic_mode():
    with _client() as client:
        basic = client.post("/calculate", json={"expression": "sin(0)", "type": "basic"})
        scientific = client.post("/calculate", json={"expression": "sin(0)", "type": "scientific"})

    assert basic.status_code == 400
    assert basic.json()["error"]["message"] == "unknown identifier 'sin'"
    assert scientific.status_code == 200


def test_calculate_uses_configured_defaults():
    with _client(default_calc_type="scientific", default_angle_unit="deg") as client:
        response = client.post("/calculate", json={"expression": "acos(0) + sqrt(16)"})

    assert response.status_code == 200
    assert response.json()["formatted_result"] == "94"


def test_calculate_trace():
    with _client() as client:
        response = client.post("/calculate", json={"expression": "1 + 2", "trace": True})

    assert response.json()["trace"] == [
        {"description": "1 + 2 = 3", "expression": "3", "value": 3.0}
    ]


def test_malformed_body_gets_failure_shape():
    with _client() as client:
        response = client.post("/calculate", json={"expression": "1", "type": "advanced"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["kind"] == "ParseError"
    assert "'type'" in body["error"]["message"]


def test_expression_length_limit_from_settings():
    with _client(max_expression_length=5) as client:
        response = client.post("/calculate", json={"expression": "1 + 2 + 3"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "expression too long"


def test_functions_listing():
    with _client() as client:
        scientific = client.get("/functions").json()
        basic = client.get("/functions", params={"type": "basic"}).json()

    names = {fn["name"] for fn in scientific["functions"]}
    assert {"sqrt", "log", "sin", "cos", "abs"} <= names
    assert {c["name"] for c in scientific["constants"]} == {"pi", "e"}
    assert basic["functions"] == []
    assert basic["operators"] == ["+", "-", "*", "/", "^", "%"]


def test_health():
    with _client() as client:
        response = client.get("/health")

    assert response.json() == {"status": "ok", "version": "0.1.0"}
