"""Project Service - 项目、数据、可视化与活动"""

from datetime import datetime
from typing import List, Optional

from datacollab.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from datacollab.models.dataset import Record
from datacollab.models.plot import VisualizationSpec
from datacollab.models.project import Activity, Project, PublicUser, Visualization
from datacollab.store.record_store import RecordStore, get_record_store
from datacollab.utils.logger import log


class ProjectService:
    """项目服务：所有操作都以当前用户身份执行，并记录活动"""

    def __init__(self, store: RecordStore):
        self.store = store

    def _load(self, project_id: str) -> Project:
        project = self.store.get_project(project_id)
        if project is None:
            raise NotFoundError("项目不存在", detail={"project_id": project_id})
        return project

    def _require_collaborator(self, project: Project, user: PublicUser) -> None:
        if not project.is_collaborator(user.id):
            raise PermissionDeniedError("您没有修改此项目的权限", detail={"project_id": project.id})

    def _require_creator(self, project: Project, user: PublicUser, action: str) -> None:
        if project.created_by != user.id:
            raise PermissionDeniedError(f"只有项目创建者可以{action}", detail={"project_id": project.id})

    def _touch(self, project: Project) -> Project:
        project.updated_at = datetime.now()
        return self.store.save_project(project)

    def log_activity(self, activity_type: str, user: PublicUser, project_id: Optional[str], details: str) -> Activity:
        """写入活动记录"""
        activity = Activity(
            type=activity_type,
            project_id=project_id,
            user_id=user.id,
            details=details
        )
        self.store.append_activity(activity)
        log.info(f"[activity] {activity_type}: {details}")
        return activity

    def create_project(self, user: PublicUser, name: str, description: Optional[str] = None) -> Project:
        """创建项目（创建者自动成为协作者）"""
        project = Project(
            name=name,
            description=description,
            created_by=user.id,
            collaborators=[user.id]
        )
        self.store.save_project(project)
        self.log_activity("project_created", user, project.id, f'项目 "{project.name}" 已创建')
        return project

    def list_projects(self, user: PublicUser) -> List[Project]:
        """当前用户参与的项目"""
        return [p for p in self.store.list_projects() if p.is_collaborator(user.id)]

    def get_project(self, user: PublicUser, project_id: str) -> Project:
        project = self._load(project_id)
        if not project.is_collaborator(user.id):
            raise PermissionDeniedError("您没有访问此项目的权限", detail={"project_id": project_id})
        return project

    def update_project(
        self,
        user: PublicUser,
        project_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> Project:
        """更新名称与描述（协作者可操作）"""
        project = self._load(project_id)
        self._require_collaborator(project, user)

        if name is not None:
            project.name = name
        if description is not None:
            project.description = description

        project = self._touch(project)
        self.log_activity("project_updated", user, project.id, f'项目 "{project.name}" 已更新')
        return project

    def delete_project(self, user: PublicUser, project_id: str) -> bool:
        """删除项目（仅创建者）"""
        project = self._load(project_id)
        self._require_creator(project, user, "删除项目")

        self.store.delete_project(project_id)
        self.log_activity("project_deleted", user, project_id, f'项目 "{project.name}" 已删除')
        return True

    def add_data(self, user: PublicUser, project_id: str, records: List[Record]) -> Project:
        """替换项目数据（协作者可操作）"""
        project = self._load(project_id)
        self._require_collaborator(project, user)

        project.data = list(records)
        project = self._touch(project)
        self.log_activity("data_added", user, project.id, f'数据已添加到项目 "{project.name}"（{len(records)} 行）')
        return project

    def add_visualization(self, user: PublicUser, project_id: str, spec: VisualizationSpec) -> Visualization:
        """保存可视化（协作者可操作）"""
        project = self._load(project_id)
        self._require_collaborator(project, user)

        visualization = Visualization(
            name=spec.title,
            type=spec.type,
            config=spec.config,
            created_by=user.id
        )
        project.visualizations.append(visualization)
        self._touch(project)
        self.log_activity(
            "visualization_added",
            user,
            project.id,
            f'可视化 "{visualization.title}" 已添加到项目 "{project.name}"'
        )
        return visualization

    def add_collaborator(self, user: PublicUser, project_id: str, collaborator_id: str) -> Project:
        """添加协作者（仅创建者）"""
        project = self._load(project_id)
        self._require_creator(project, user, "添加协作者")

        collaborator = self.store.get_user(collaborator_id)
        if collaborator is None:
            raise NotFoundError("用户不存在", detail={"user_id": collaborator_id})
        if project.is_collaborator(collaborator_id):
            raise ConflictError("该用户已是项目协作者", detail={"user_id": collaborator_id})

        project.collaborators.append(collaborator_id)
        project = self._touch(project)
        self.log_activity(
            "collaborator_added",
            user,
            project.id,
            f'{collaborator.name} 已成为项目 "{project.name}" 的协作者'
        )
        return project

    def get_activity(self, user: PublicUser, project_id: Optional[str] = None) -> List[Activity]:
        """
        活动记录（按时间先后）

        指定项目时需要访问权限；否则返回用户可见项目的活动以及用户本人的操作。
        """
        if project_id:
            self.get_project(user, project_id)
            return self.store.list_activity(project_id)

        visible = {p.id for p in self.list_projects(user)}
        return [
            a for a in self.store.list_activity()
            if a.project_id in visible or a.user_id == user.id
        ]


# 全局单例
_project_service = None


def get_project_service() -> ProjectService:
    """获取 ProjectService 单例"""
    global _project_service
    if _project_service is None:
        _project_service = ProjectService(get_record_store())
    return _project_service
