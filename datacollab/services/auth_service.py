"""Auth Service - 注册、登录与会话"""

import hashlib
import hmac
import secrets
from typing import Dict, Optional, Tuple

from datacollab.core.exceptions import AuthenticationError, ConflictError
from datacollab.models.project import PublicUser, User
from datacollab.store.record_store import RecordStore, get_record_store
from datacollab.utils.logger import log


PBKDF2_ITERATIONS = 120_000


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """生成 pbkdf2_sha256$迭代次数$盐$哈希"""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        _, iterations, salt, expected = password_hash.split("$")
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), int(iterations))
    return hmac.compare_digest(digest.hex(), expected)


class AuthService:
    """认证服务（会话保存在内存中）"""

    def __init__(self, store: RecordStore):
        self.store = store
        self.sessions: Dict[str, str] = {}

    def register(self, name: str, email: str, password: str, role: str = "user") -> PublicUser:
        """
        注册用户

        Raises:
            ConflictError: 邮箱已被使用
        """
        if self.store.find_user_by_email(email):
            raise ConflictError("该邮箱已被使用", detail={"email": email})

        user = User(
            name=name,
            email=email,
            role=role,
            password_hash=hash_password(password)
        )
        self.store.save_user(user)
        log.info(f"用户已注册: {email}")
        return user.to_public()

    def login(self, email: str, password: str) -> Tuple[str, PublicUser]:
        """
        登录

        Returns:
            (会话令牌, 用户)
        """
        user = self.store.find_user_by_email(email)
        if user is None:
            raise AuthenticationError("用户不存在")
        if not verify_password(password, user.password_hash):
            log.warning(f"密码错误: {email}")
            raise AuthenticationError("密码错误")

        token = secrets.token_urlsafe(32)
        self.sessions[token] = user.id
        log.info(f"用户登录: {email}")
        return token, user.to_public()

    def logout(self, token: str) -> bool:
        return self.sessions.pop(token, None) is not None

    def current_user(self, token: Optional[str]) -> PublicUser:
        """根据令牌获取当前用户"""
        user_id = self.sessions.get(token or "")
        if user_id is None:
            raise AuthenticationError("未登录或会话已过期")

        user = self.store.get_user(user_id)
        if user is None:
            self.sessions.pop(token, None)
            raise AuthenticationError("用户不存在")
        return user.to_public()


# 全局单例
_auth_service = None


def get_auth_service() -> AuthService:
    """获取 AuthService 单例"""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(get_record_store())
    return _auth_service
