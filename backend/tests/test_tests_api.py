"""
测试用例与执行结果 API 单元测试
"""


def _create_test(client, requirement_id=None, title="手工测试"):
    response = client.post(
        "/api/v1/tests",
        json={"requirement_id": requirement_id, "title": title, "type": "functional"},
    )
    assert response.status_code == 201
    return response.json()


def _record(client, test_id, status, **extra):
    response = client.post(f"/api/v1/tests/{test_id}/results", json={"status": status, **extra})
    assert response.status_code == 201
    return response.json()


def test_create_test(client, create_requirement):
    requirement_id = create_requirement()["id"]
    data = _create_test(client, requirement_id)
    assert data["requirement_id"] == requirement_id
    assert data["status"] == "pending"
    assert data["ai_generated"] is False


def test_create_test_without_requirement(client):
    data = _create_test(client)
    assert data["requirement_id"] is None


def test_create_test_unknown_requirement(client):
    response = client.post("/api/v1/tests", json={"requirement_id": 9999, "title": "x"})
    assert response.status_code == 404


def test_get_test_not_found(client):
    response = client.get("/api/v1/tests/9999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Test not found"


def test_record_and_list_results(client):
    test_id = _create_test(client)["id"]
    _record(client, test_id, "passed", execution_time=120, log_output="ok")
    failed = _record(client, test_id, "failed", error_message="AssertionError")
    assert failed["error_message"] == "AssertionError"

    results = client.get(f"/api/v1/tests/{test_id}/results").json()
    assert [r["status"] for r in results] == ["failed", "passed"]
    assert results[1]["execution_time"] == 120

    # 测试状态跟随最近一次结果
    assert client.get(f"/api/v1/tests/{test_id}").json()["status"] == "failed"


def test_results_limited_to_ten(client):
    test_id = _create_test(client)["id"]
    for _ in range(12):
        _record(client, test_id, "passed")
    results = client.get(f"/api/v1/tests/{test_id}/results").json()
    assert len(results) == 10


def test_record_result_validation(client):
    test_id = _create_test(client)["id"]
    response = client.post(f"/api/v1/tests/{test_id}/results", json={"status": ""})
    assert response.status_code == 422
    response = client.post(
        f"/api/v1/tests/{test_id}/results", json={"status": "passed", "execution_time": -1}
    )
    assert response.status_code == 422


def test_record_result_not_found(client):
    response = client.post("/api/v1/tests/9999/results", json={"status": "passed"})
    assert response.status_code == 404


def test_flaky_status_not_enough_runs(client):
    test_id = _create_test(client)["id"]
    _record(client, test_id, "failed")

    response = client.get(f"/api/v1/tests/{test_id}/flaky-status")
    assert response.status_code == 200
    assert response.json() == {"is_flaky": False, "reason": "Not enough test runs"}


def test_flaky_status_mixed_results(client):
    test_id = _create_test(client)["id"]
    for status in ["passed", "failed", "passed"]:
        _record(client, test_id, status)

    response = client.get(f"/api/v1/tests/{test_id}/flaky-status")
    assert response.json() == {
        "is_flaky": True,
        "pass_count": 2,
        "fail_count": 1,
        "total_runs": 3,
    }


def test_flaky_status_uses_last_five_runs(client):
    test_id = _create_test(client)["id"]
    for status in ["failed", "failed"] + ["passed"] * 5:
        _record(client, test_id, status)

    data = client.get(f"/api/v1/tests/{test_id}/flaky-status").json()
    assert data["total_runs"] == 5
    assert data["is_flaky"] is False


def test_delete_test_removes_results(client, db):
    from reqtrack.database.models import TestResult

    test_id = _create_test(client)["id"]
    _record(client, test_id, "passed")

    response = client.delete(f"/api/v1/tests/{test_id}")
    assert response.status_code == 200
    assert response.json() == {"message": "Test deleted successfully", "id": test_id}
    assert db.query(TestResult).filter(TestResult.test_id == test_id).count() == 0
    assert client.get(f"/api/v1/tests/{test_id}").status_code == 404


def test_delete_test_not_found(client):
    assert client.delete("/api/v1/tests/9999").status_code == 404
