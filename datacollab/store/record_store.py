"""Record Store - 用户、项目与活动的持久化"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import duckdb

from datacollab.core.config import settings
from datacollab.models.project import Activity, Project, User
from datacollab.utils.logger import log


class RecordStore(ABC):
    """存储接口（由服务层注入）"""

    # 用户
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def find_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def list_users(self) -> List[User]: ...

    @abstractmethod
    def save_user(self, user: User) -> User: ...

    # 项目
    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]: ...

    @abstractmethod
    def list_projects(self) -> List[Project]: ...

    @abstractmethod
    def save_project(self, project: Project) -> Project: ...

    @abstractmethod
    def delete_project(self, project_id: str) -> bool: ...

    # 活动
    @abstractmethod
    def append_activity(self, activity: Activity) -> Activity: ...

    @abstractmethod
    def list_activity(self, project_id: Optional[str] = None) -> List[Activity]: ...


class DuckDBRecordStore(RecordStore):
    """DuckDB 存储：每条记录保存为一段 JSON 文本"""

    SCHEMA = [
        "CREATE TABLE IF NOT EXISTS users (id VARCHAR PRIMARY KEY, email VARCHAR, doc VARCHAR)",
        "CREATE TABLE IF NOT EXISTS projects (id VARCHAR PRIMARY KEY, doc VARCHAR)",
        "CREATE TABLE IF NOT EXISTS activity (id VARCHAR PRIMARY KEY, project_id VARCHAR, ts TIMESTAMP, doc VARCHAR)",
    ]

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _get_connection(self) -> duckdb.DuckDBPyConnection:
        """获取 DuckDB 连接"""
        return duckdb.connect(str(self.db_path))

    def _init_schema(self):
        conn = self._get_connection()
        try:
            for statement in self.SCHEMA:
                conn.execute(statement)
        finally:
            conn.close()
        log.info(f"记录存储已就绪: {self.db_path}")

    def _fetch_docs(self, sql: str, params: Optional[List] = None) -> List[str]:
        conn = self._get_connection()
        try:
            return [row[0] for row in conn.execute(sql, params or []).fetchall()]
        finally:
            conn.close()

    def _execute(self, sql: str, params: List) -> None:
        conn = self._get_connection()
        try:
            conn.execute(sql, params)
        finally:
            conn.close()

    # 用户
    def get_user(self, user_id: str) -> Optional[User]:
        docs = self._fetch_docs("SELECT doc FROM users WHERE id = ?", [user_id])
        return User.model_validate_json(docs[0]) if docs else None

    def find_user_by_email(self, email: str) -> Optional[User]:
        docs = self._fetch_docs("SELECT doc FROM users WHERE lower(email) = lower(?)", [email])
        return User.model_validate_json(docs[0]) if docs else None

    def list_users(self) -> List[User]:
        return [User.model_validate_json(d) for d in self._fetch_docs("SELECT doc FROM users ORDER BY email")]

    def save_user(self, user: User) -> User:
        self._execute(
            "INSERT OR REPLACE INTO users (id, email, doc) VALUES (?, ?, ?)",
            [user.id, user.email, user.model_dump_json()]
        )
        return user

    # 项目
    def get_project(self, project_id: str) -> Optional[Project]:
        docs = self._fetch_docs("SELECT doc FROM projects WHERE id = ?", [project_id])
        return Project.model_validate_json(docs[0]) if docs else None

    def list_projects(self) -> List[Project]:
        projects = [Project.model_validate_json(d) for d in self._fetch_docs("SELECT doc FROM projects")]
        return sorted(projects, key=lambda p: p.created_at)

    def save_project(self, project: Project) -> Project:
        self._execute(
            "INSERT OR REPLACE INTO projects (id, doc) VALUES (?, ?)",
            [project.id, project.model_dump_json()]
        )
        return project

    def delete_project(self, project_id: str) -> bool:
        if self.get_project(project_id) is None:
            return False
        self._execute("DELETE FROM projects WHERE id = ?", [project_id])
        return True

    # 活动
    def append_activity(self, activity: Activity) -> Activity:
        self._execute(
            "INSERT INTO activity (id, project_id, ts, doc) VALUES (?, ?, ?, ?)",
            [activity.id, activity.project_id, activity.timestamp, activity.model_dump_json()]
        )
        return activity

    def list_activity(self, project_id: Optional[str] = None) -> List[Activity]:
        if project_id:
            docs = self._fetch_docs(
                "SELECT doc FROM activity WHERE project_id = ? ORDER BY ts, rowid", [project_id]
            )
        else:
            docs = self._fetch_docs("SELECT doc FROM activity ORDER BY ts, rowid")
        return [Activity.model_validate_json(d) for d in docs]


# 全局单例
_record_store = None


def get_record_store() -> RecordStore:
    """获取 RecordStore 单例"""
    global _record_store
    if _record_store is None:
        _record_store = DuckDBRecordStore(settings.store_path)
    return _record_store
