"""
需求级联删除测试

删除需求时必须同时删除其测试、执行结果、代码变更与评估记录，不留孤儿记录。
"""
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from reqtrack.database.models import (
    CodeChange,
    ReleaseAssessment,
    Requirement,
    Test,
    TestResult,
)
from reqtrack.services.requirement_service import RequirementService


def _populate(client, create_requirement, title):
    requirement_id = create_requirement(title=title, acceptance_criteria="a\nb")["id"]
    client.post(f"/api/v1/requirements/{requirement_id}/generate-tests")
    for test in client.get(f"/api/v1/requirements/{requirement_id}/tests").json():
        client.post(f"/api/v1/tests/{test['id']}/results", json={"status": "failed"})
        client.post(f"/api/v1/tests/{test['id']}/results", json={"status": "passed"})
    client.post("/api/v1/code-changes", json={"requirement_id": requirement_id, "file_path": "x.py"})
    client.post(f"/api/v1/requirements/{requirement_id}/assessments")
    return requirement_id


def test_delete_leaves_no_orphans(client, create_requirement, db):
    doomed = _populate(client, create_requirement, "删除")
    kept = _populate(client, create_requirement, "保留")

    response = client.delete(f"/api/v1/requirements/{doomed}")
    assert response.status_code == 204

    assert db.query(Requirement).filter(Requirement.id == doomed).count() == 0
    assert db.query(Test).filter(Test.requirement_id == doomed).count() == 0
    assert db.query(CodeChange).filter(CodeChange.requirement_id == doomed).count() == 0
    assert db.query(ReleaseAssessment).filter(ReleaseAssessment.requirement_id == doomed).count() == 0
    # 所有结果都应指向仍存在的测试
    orphaned = (
        db.query(TestResult)
        .outerjoin(Test, Test.id == TestResult.test_id)
        .filter(Test.id.is_(None))
        .count()
    )
    assert orphaned == 0

    # 其他需求的数据不受影响
    assert db.query(Test).filter(Test.requirement_id == kept).count() == 2
    assert db.query(TestResult).count() == 4
    assert db.query(CodeChange).filter(CodeChange.requirement_id == kept).count() == 1
    assert db.query(ReleaseAssessment).filter(ReleaseAssessment.requirement_id == kept).count() == 1


def test_service_returns_false_for_missing(db):
    assert RequirementService(db).delete_requirement(9999) is False


def test_store_failure_rolls_back(client, create_requirement, db):
    requirement_id = _populate(client, create_requirement, "失败")
    service = RequirementService(db)

    failure = OperationalError("COMMIT", {}, Exception("disk I/O error"))
    with patch.object(db, "commit", side_effect=failure):
        with pytest.raises(OperationalError):
            service.delete_requirement(requirement_id)

    assert db.query(Requirement).filter(Requirement.id == requirement_id).count() == 1
    assert db.query(Test).filter(Test.requirement_id == requirement_id).count() == 2
    assert db.query(TestResult).count() == 4


def test_store_failure_returns_500(client, create_requirement):
    requirement_id = create_requirement()["id"]

    with patch(
        "reqtrack.services.requirement_service.RequirementService.delete_requirement",
        side_effect=OperationalError("DELETE", {}, Exception("database is locked")),
    ):
        response = client.delete(f"/api/v1/requirements/{requirement_id}")

    assert response.status_code == 500
    assert "database is locked" in response.json()["detail"]
