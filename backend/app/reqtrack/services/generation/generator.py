from __future__ import annotations

from typing import Any

from reqtrack.models.test_schemas import GeneratedTest

DEFAULT_TITLE = "Feature"


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def synthesize_tests(requirement: Any) -> list[GeneratedTest]:
    """Rule-based test synthesis (deterministic, no LLM).

    Accepts anything exposing title / description / user_story /
    acceptance_criteria (ORM row or Pydantic model). Rules are applied in
    order and are not exclusive:

    - user story      -> happy path + error handling
    - acceptance list -> one test per non-blank line
    - description     -> basic functionality (only without criteria)
    - nothing at all  -> a single basic test
    """
    if requirement is None:
        return []

    title = getattr(requirement, "title", None) or DEFAULT_TITLE
    user_story = _text(getattr(requirement, "user_story", None))
    description = _text(getattr(requirement, "description", None))
    criteria_text = getattr(requirement, "acceptance_criteria", None) or ""

    tests: list[GeneratedTest] = []

    if user_story:
        tests.append(GeneratedTest(
            title=f"Test: {title} - Happy Path",
            description=f"Verify that {user_story} works as expected",
            type="functional",
        ))
        tests.append(GeneratedTest(
            title=f"Test: {title} - Error Handling",
            description=f"Verify error handling for {user_story}",
            type="negative",
        ))

    if criteria_text.strip():
        # 编号只统计非空行
        criteria = [line.strip() for line in criteria_text.split("\n")]
        for number, criterion in enumerate((c for c in criteria if c), start=1):
            tests.append(GeneratedTest(
                title=f"Test: {title} - Acceptance Criterion {number}",
                description=criterion,
                type="acceptance",
            ))
    elif description:
        tests.append(GeneratedTest(
            title=f"Test: {title} - Basic Functionality",
            description=f"Verify basic functionality: {description}",
            type="functional",
        ))

    if not tests:
        tests.append(GeneratedTest(
            title=f"Test: {title} - Basic Test",
            description=f"Basic test for {title}",
            type="functional",
        ))

    return tests
