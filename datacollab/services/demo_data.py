"""演示数据初始化"""

from datacollab.models.plot import ChartConfig, VisualizationSpec
from datacollab.services.auth_service import AuthService
from datacollab.services.project_service import ProjectService
from datacollab.utils.logger import log


DEMO_USERS = [
    {"name": "Admin", "email": "admin@datacollab.com", "password": "admin123", "role": "admin"},
    {"name": "Utilisateur Test", "email": "user@datacollab.com", "password": "user123", "role": "user"},
]

DEMO_ROWS = [
    {"mois": "Janvier", "ventes": 1200, "depenses": 800},
    {"mois": "Février", "ventes": 1800, "depenses": 1200},
    {"mois": "Mars", "ventes": 1400, "depenses": 1100},
    {"mois": "Avril", "ventes": 2200, "depenses": 1300},
    {"mois": "Mai", "ventes": 2600, "depenses": 1500},
    {"mois": "Juin", "ventes": 2900, "depenses": 1700},
]


def init_demo_data(auth: AuthService, projects: ProjectService) -> bool:
    """
    存储为空时写入演示用户、项目、数据与折线图

    Returns:
        是否写入了演示数据
    """
    store = projects.store
    if store.list_users() or store.list_projects():
        return False

    users = [auth.register(**u) for u in DEMO_USERS]
    admin = users[0]

    project = projects.create_project(
        admin,
        name="Projet de démonstration",
        description="Un projet pour démontrer les fonctionnalités de DataCollab"
    )
    projects.add_data(admin, project.id, DEMO_ROWS)
    projects.add_visualization(
        admin,
        project.id,
        VisualizationSpec(
            name="Évolution des ventes et dépenses",
            type="line",
            config=ChartConfig(x_axis="mois", y_axis=["ventes", "depenses"])
        )
    )

    log.info(f"演示数据已写入: 项目 {project.id}")
    return True
