from fastapi import APIRouter

from reqtrack.api.v1.routes_requirements import router as requirements_router
from reqtrack.api.v1.routes_tests import router as tests_router
from reqtrack.api.v1.routes_code_changes import router as code_changes_router
from reqtrack.api.v1.routes_snapshots import router as snapshots_router

# v1 统一入口：所有 v1 API 都从 /api/v1 开始
router = APIRouter(prefix="/api/v1")

router.include_router(requirements_router)
router.include_router(tests_router)
router.include_router(code_changes_router)
router.include_router(snapshots_router)
