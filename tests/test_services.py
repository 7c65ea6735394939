"""认证与项目服务测试"""

import pytest

from datacollab.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)
from datacollab.models.plot import VisualizationSpec
from datacollab.services.auth_service import hash_password, verify_password
from datacollab.services.demo_data import init_demo_data


class TestAuthService:
    def test_password_hashing(self):
        hashed = hash_password("secret")
        assert hashed.startswith("pbkdf2_sha256$")
        assert "secret" not in hashed
        assert verify_password("secret", hashed)
        assert not verify_password("wrong", hashed)
        assert not verify_password("secret", "garbage")

    def test_register_and_login(self, auth, alice):
        assert not hasattr(alice, "password_hash")

        token, user = auth.login("alice@example.com", "secret")
        assert user.id == alice.id
        assert auth.current_user(token) == user

    def test_duplicate_email(self, auth, alice):
        with pytest.raises(ConflictError):
            auth.register(name="Other", email="alice@example.com", password="x")

    def test_login_failures(self, auth, alice):
        with pytest.raises(AuthenticationError):
            auth.login("nobody@example.com", "secret")
        with pytest.raises(AuthenticationError):
            auth.login("alice@example.com", "wrong")

    def test_logout(self, auth, alice):
        token, _ = auth.login("alice@example.com", "secret")
        assert auth.logout(token) is True
        assert auth.logout(token) is False
        with pytest.raises(AuthenticationError):
            auth.current_user(token)

    def test_current_user_without_token(self, auth):
        with pytest.raises(AuthenticationError):
            auth.current_user(None)


class TestProjectService:
    def test_create_project_logs_activity(self, projects, alice):
        project = projects.create_project(alice, "Sales", "Q1 numbers")

        assert project.created_by == alice.id
        assert project.collaborators == [alice.id]
        assert [a.type for a in projects.get_activity(alice, project.id)] == ["project_created"]

    def test_list_projects_only_shows_collaborations(self, projects, alice, bob):
        projects.create_project(alice, "A")
        projects.create_project(bob, "B")
        assert [p.name for p in projects.list_projects(alice)] == ["A"]

    def test_non_collaborator_cannot_read_or_update(self, projects, alice, bob):
        project = projects.create_project(alice, "Private")
        with pytest.raises(PermissionDeniedError):
            projects.get_project(bob, project.id)
        with pytest.raises(PermissionDeniedError):
            projects.update_project(bob, project.id, name="Hijacked")
        with pytest.raises(PermissionDeniedError):
            projects.add_data(bob, project.id, [{"a": 1}])

    def test_unknown_project(self, projects, alice):
        with pytest.raises(NotFoundError):
            projects.get_project(alice, "missing")

    def test_update_project(self, projects, alice):
        project = projects.create_project(alice, "Old")
        updated = projects.update_project(alice, project.id, name="New")
        assert updated.name == "New"
        assert updated.updated_at >= project.updated_at

    def test_collaborator_flow(self, projects, alice, bob):
        project = projects.create_project(alice, "Shared")

        with pytest.raises(PermissionDeniedError):
            projects.add_collaborator(bob, project.id, bob.id)

        projects.add_collaborator(alice, project.id, bob.id)
        with pytest.raises(ConflictError):
            projects.add_collaborator(alice, project.id, bob.id)
        with pytest.raises(NotFoundError):
            projects.add_collaborator(alice, project.id, "ghost")

        # 协作者可以修改数据，但不能删除项目
        projects.add_data(bob, project.id, [{"m": "Jan", "v": 10}])
        with pytest.raises(PermissionDeniedError):
            projects.delete_project(bob, project.id)

        assert projects.get_project(bob, project.id).data == [{"m": "Jan", "v": 10}]

    def test_add_data_replaces_rows(self, projects, alice):
        project = projects.create_project(alice, "Data")
        projects.add_data(alice, project.id, [{"a": 1}, {"a": 2}])
        projects.add_data(alice, project.id, [{"b": 3}])
        assert projects.get_project(alice, project.id).data == [{"b": 3}]

    def test_add_visualization(self, projects, alice):
        project = projects.create_project(alice, "Charts")
        viz = projects.add_visualization(
            alice, project.id, VisualizationSpec(type="bar", config={"xAxis": "m", "yAxis": ["v"]})
        )

        stored = projects.get_project(alice, project.id)
        assert stored.get_visualization(viz.id).config.y_axis == ["v"]
        assert viz.name == "Visualisation bar"
        assert viz.created_by == alice.id

    def test_delete_project(self, projects, alice):
        project = projects.create_project(alice, "Doomed")
        assert projects.delete_project(alice, project.id) is True
        with pytest.raises(NotFoundError):
            projects.get_project(alice, project.id)

        # 删除记录仍然出现在本人的活动中
        types = [a.type for a in projects.get_activity(alice)]
        assert types == ["project_created", "project_deleted"]

    def test_activity_visibility(self, projects, alice, bob):
        mine = projects.create_project(alice, "Mine")
        projects.create_project(bob, "Theirs")

        activity = projects.get_activity(alice)
        assert {a.project_id for a in activity} == {mine.id}


def test_init_demo_data(auth, projects):
    assert init_demo_data(auth, projects) is True
    assert init_demo_data(auth, projects) is False

    token, admin = auth.login("admin@datacollab.com", "admin123")
    demo = projects.list_projects(admin)[0]
    assert len(demo.data) == 6
    assert demo.visualizations[0].type == "line"
    assert [a.type for a in projects.get_activity(admin, demo.id)] == [
        "project_created", "data_added", "visualization_added"
    ]
