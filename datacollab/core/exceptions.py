"""业务异常定义"""

from typing import Any, Dict


class DataCollabError(Exception):
    """业务错误（结构化）"""

    code = "error"

    def __init__(self, message: str, detail: Dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}


class DataParseError(DataCollabError):
    """文件解析失败"""
    code = "parse_error"


class NotFoundError(DataCollabError):
    """资源不存在"""
    code = "not_found"


class PermissionDeniedError(DataCollabError):
    """无权操作"""
    code = "permission_denied"


class AuthenticationError(DataCollabError):
    """认证失败"""
    code = "authentication_failed"


class ConflictError(DataCollabError):
    """资源冲突（如重复邮箱）"""
    code = "conflict"
