"""项目、用户与活动模型"""

import uuid
from typing import List, Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from datacollab.core.constants import ACTIVITY_TYPES
from datacollab.models.plot import VisualizationSpec


def new_id() -> str:
    return str(uuid.uuid4())


class PublicUser(BaseModel):
    """对外展示的用户（不含密码）"""
    id: str = Field(default_factory=new_id, description="用户ID")
    name: str = Field(..., description="用户名")
    email: str = Field(..., description="邮箱")
    role: str = Field("user", description="角色: admin, user")
    created_at: datetime = Field(default_factory=datetime.now, description="创建时间")


class User(PublicUser):
    """存储中的用户"""
    password_hash: str = Field(..., description="PBKDF2 密码哈希")

    def to_public(self) -> PublicUser:
        return PublicUser(**self.model_dump(exclude={"password_hash"}))


class Visualization(VisualizationSpec):
    """已保存的可视化"""
    id: str = Field(default_factory=new_id, description="可视化ID")
    created_by: str = Field(..., description="创建者ID")
    created_at: datetime = Field(default_factory=datetime.now, description="创建时间")


class Project(BaseModel):
    """项目"""
    id: str = Field(default_factory=new_id, description="项目ID")
    name: str = Field(..., description="项目名称")
    description: Optional[str] = Field(None, description="项目描述")
    created_by: str = Field(..., description="创建者ID")
    collaborators: List[str] = Field(default_factory=list, description="协作者ID列表")
    data: List[Dict[str, Any]] = Field(default_factory=list, description="数据行")
    visualizations: List[Visualization] = Field(default_factory=list, description="可视化列表")
    created_at: datetime = Field(default_factory=datetime.now, description="创建时间")
    updated_at: datetime = Field(default_factory=datetime.now, description="更新时间")

    def is_collaborator(self, user_id: str) -> bool:
        return user_id in self.collaborators

    def get_visualization(self, visualization_id: str) -> Optional[Visualization]:
        for viz in self.visualizations:
            if viz.id == visualization_id:
                return viz
        return None


class Activity(BaseModel):
    """活动记录"""
    id: str = Field(default_factory=new_id, description="活动ID")
    type: str = Field(..., description="活动类型")
    project_id: Optional[str] = Field(None, description="项目ID")
    user_id: str = Field(..., description="操作用户ID")
    details: str = Field("", description="描述")
    timestamp: datetime = Field(default_factory=datetime.now, description="发生时间")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v: str) -> str:
        if v not in ACTIVITY_TYPES:
            raise ValueError(f"未知的活动类型: {v}")
        return v
