"""
ReqTrack 测试配置

统一管理测试数据库初始化，确保所有模型都被导入和注册。
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from reqtrack.database.config import Base, get_db
from reqtrack.database import models  # noqa: F401 - 注册模型
from reqtrack.governance.policy_loader import ENV_POLICY_PATH, clear_policy_cache
from reqtrack.main import app

# 使用文件数据库进行测试（内存数据库有连接隔离问题）
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """覆盖数据库依赖"""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


@pytest.fixture
def db():
    """提供数据库会话"""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def apply_overrides():
    """每个测试自动应用依赖覆盖，并在结束后清理"""
    old_overrides = app.dependency_overrides.copy()
    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides = old_overrides


@pytest.fixture(autouse=True)
def setup_database():
    """每个测试前创建所有表，测试后清理"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def default_policy(monkeypatch):
    """使用包内默认策略文件"""
    monkeypatch.delenv(ENV_POLICY_PATH, raising=False)
    clear_policy_cache()
    yield
    clear_policy_cache()


@pytest.fixture
def client():
    """提供测试客户端"""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def create_requirement(client):
    """创建需求并返回响应 JSON"""
    def _create(**overrides):
        payload = {"title": "用户登录", "description": "登录功能"}
        payload.update(overrides)
        response = client.post("/api/v1/requirements", json=payload)
        assert response.status_code == 201
        return response.json()
    return _create
