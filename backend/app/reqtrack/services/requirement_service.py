"""ReqTrack - Requirement Service

需求及其子记录的维护（级联删除、测试重新生成）
"""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reqtrack.database.models import (
    CodeChange,
    ReleaseAssessment,
    Requirement,
    Test,
    TestResult,
)
from reqtrack.services.generation.generator import synthesize_tests

logger = logging.getLogger(__name__)


class RequirementService:
    """需求维护服务

    数据库不做外键级联，子记录必须先于父记录删除：
    TestResults → Tests → CodeChanges → ReleaseAssessments → Requirement
    所有步骤在同一事务中执行，任一步失败整体回滚。
    """

    def __init__(self, db: Session):
        self.db = db

    def delete_requirement(self, requirement_id: int) -> bool:
        """
        级联删除需求

        Args:
            requirement_id: 需求 ID

        Returns:
            需求不存在时返回 False（不删除任何记录）
        """
        if self.db.get(Requirement, requirement_id) is None:
            return False

        test_ids = select(Test.id).where(Test.requirement_id == requirement_id)
        try:
            self.db.query(TestResult).filter(
                TestResult.test_id.in_(test_ids)
            ).delete(synchronize_session=False)
            self.db.query(Test).filter(
                Test.requirement_id == requirement_id
            ).delete(synchronize_session=False)
            self.db.query(CodeChange).filter(
                CodeChange.requirement_id == requirement_id
            ).delete(synchronize_session=False)
            self.db.query(ReleaseAssessment).filter(
                ReleaseAssessment.requirement_id == requirement_id
            ).delete(synchronize_session=False)
            self.db.query(Requirement).filter(
                Requirement.id == requirement_id
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"删除需求失败，已回滚: requirement_id={requirement_id}")
            raise

        logger.info(f"需求已删除: requirement_id={requirement_id}")
        return True

    def delete_test(self, test_id: int) -> bool:
        """删除测试及其执行结果"""
        if self.db.get(Test, test_id) is None:
            return False

        try:
            self.db.query(TestResult).filter(
                TestResult.test_id == test_id
            ).delete(synchronize_session=False)
            self.db.query(Test).filter(Test.id == test_id).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"删除测试失败，已回滚: test_id={test_id}")
            raise
        return True

    def regenerate_tests(self, requirement: Requirement) -> list[Test]:
        """
        重新生成需求的自动测试

        先删除旧的自动生成测试（含执行结果），再写入新推导的测试；
        手工创建的测试保持不变。
        """
        drafts = synthesize_tests(requirement)
        generated_ids = select(Test.id).where(
            Test.requirement_id == requirement.id,
            Test.ai_generated.is_(True),
        )
        try:
            self.db.query(TestResult).filter(
                TestResult.test_id.in_(generated_ids)
            ).delete(synchronize_session=False)
            self.db.query(Test).filter(
                Test.requirement_id == requirement.id,
                Test.ai_generated.is_(True),
            ).delete(synchronize_session=False)

            created = [
                Test(
                    requirement_id=requirement.id,
                    title=draft.title,
                    description=draft.description,
                    type=draft.type,
                    ai_generated=True,
                )
                for draft in drafts
            ]
            self.db.add_all(created)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"生成测试失败，已回滚: requirement_id={requirement.id}")
            raise

        logger.info(f"已为需求 {requirement.id} 生成 {len(created)} 个测试")
        return created
