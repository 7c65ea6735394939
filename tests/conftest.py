"""共享测试夹具"""

import pytest
from fastapi.testclient import TestClient

from datacollab.api.main import app
from datacollab.engines.chart_engine import ChartEngine
from datacollab.services.auth_service import AuthService, get_auth_service
from datacollab.services.project_service import ProjectService, get_project_service
from datacollab.store.record_store import DuckDBRecordStore


@pytest.fixture
def monthly_records():
    """示例数据：月份 + 数值"""
    return [
        {"m": "Jan", "v": 10},
        {"m": "Feb", "v": 20},
        {"m": "Jan", "v": 5},
    ]


@pytest.fixture
def sales_records():
    """混合类型的示例数据"""
    return [
        {"city": "Paris", "amount": 120.5, "units": 3, "active": True, "day": "2024-01-05"},
        {"city": "Lyon", "amount": 80, "units": None, "active": False, "day": "2024-01-06"},
        {"city": "Paris", "amount": 42, "units": 7, "active": True, "day": "2024-01-07"},
        {"city": "Nice", "amount": None, "units": 1, "active": None, "day": "2024-01-08"},
    ]


@pytest.fixture
def store(tmp_path):
    return DuckDBRecordStore(tmp_path / "test.db")


@pytest.fixture
def auth(store):
    return AuthService(store)


@pytest.fixture
def projects(store):
    return ProjectService(store)


@pytest.fixture
def alice(auth):
    return auth.register(name="Alice", email="alice@example.com", password="secret")


@pytest.fixture
def bob(auth):
    return auth.register(name="Bob", email="bob@example.com", password="hunter2")


@pytest.fixture
def client(auth, projects):
    """隔离存储的 API 客户端（不触发演示数据）"""
    app.dependency_overrides[get_auth_service] = lambda: auth
    app.dependency_overrides[get_project_service] = lambda: projects
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def chart_engine():
    return ChartEngine()
