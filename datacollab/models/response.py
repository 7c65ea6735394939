"""API 请求与响应模型"""

from typing import List, Dict, Any, Optional
from pydantic import BaseModel, Field

from datacollab.models.project import PublicUser


class RegisterRequest(BaseModel):
    """注册请求"""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """登录请求"""
    email: str
    password: str


class LoginResponse(BaseModel):
    """登录响应"""
    token: str = Field(..., description="会话令牌")
    user: PublicUser = Field(..., description="当前用户")


class ProjectCreate(BaseModel):
    """创建项目"""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class ProjectUpdate(BaseModel):
    """更新项目（仅名称与描述）"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None


class CollaboratorRequest(BaseModel):
    """添加协作者"""
    user_id: str


class ProjectSummary(BaseModel):
    """项目列表项（不含数据行）"""
    id: str
    name: str
    description: Optional[str] = None
    created_by: str
    collaborators: List[str]
    row_count: int
    visualization_count: int


class UploadResponse(BaseModel):
    """文件上传响应"""
    project_id: str = Field(..., description="项目ID")
    filename: str = Field(..., description="文件名")
    size_bytes: int = Field(..., description="文件大小")
    row_count: int = Field(..., description="导入行数")
    types: Dict[str, str] = Field(default_factory=dict, description="推断的字段类型")


class AggregateResponse(BaseModel):
    """聚合结果"""
    rows: List[Dict[str, Any]]
    row_count: int
