"""FastAPI 主应用"""

from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, File, Header, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from datacollab.core.config import settings
from datacollab.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DataCollabError,
    DataParseError,
    NotFoundError,
    PermissionDeniedError,
)
from datacollab.engines.aggregator import aggregate
from datacollab.engines.chart_engine import ChartEngine, get_chart_engine
from datacollab.engines.data_parser import parse_file, records_to_csv
from datacollab.engines.filter_engine import filter_records, paginate, search_records, sort_records
from datacollab.engines.stats_summarizer import summarize
from datacollab.engines.type_inferencer import infer_types, present_values
from datacollab.models.dataset import ColumnSchema, DatasetSchema, Page, Record
from datacollab.models.plot import ChartOutput, VisualizationSpec
from datacollab.models.project import Activity, Project, PublicUser, Visualization
from datacollab.models.query import AggregationSpec, QueryRequest
from datacollab.models.response import (
    AggregateResponse,
    CollaboratorRequest,
    LoginRequest,
    LoginResponse,
    ProjectCreate,
    ProjectSummary,
    ProjectUpdate,
    RegisterRequest,
    UploadResponse,
)
from datacollab.services.auth_service import AuthService, get_auth_service
from datacollab.services.demo_data import init_demo_data
from datacollab.services.project_service import ProjectService, get_project_service
from datacollab.utils.logger import log


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed_demo_data:
        init_demo_data(get_auth_service(), get_project_service())
    yield


# 创建应用
app = FastAPI(
    title="DataCollab",
    description="协作式数据分析服务：项目、数据集、表格与图表",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 业务异常 → HTTP 状态码
ERROR_STATUS: Dict[type, int] = {
    DataParseError: 400,
    AuthenticationError: 401,
    PermissionDeniedError: 403,
    NotFoundError: 404,
    ConflictError: 409,
}


@app.exception_handler(DataCollabError)
async def handle_business_error(request: Request, exc: DataCollabError):
    status_code = ERROR_STATUS.get(type(exc), 400)
    log.error(f"{request.method} {request.url.path} 失败: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "error": exc.to_dict()})


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def get_current_user(
    authorization: Optional[str] = Header(None),
    auth: AuthService = Depends(get_auth_service)
) -> PublicUser:
    """从 Authorization: Bearer <token> 解析当前用户"""
    return auth.current_user(_bearer_token(authorization))


def _project_records(
    project_id: str,
    user: PublicUser,
    projects: ProjectService
) -> List[Record]:
    return projects.get_project(user, project_id).data


def _apply_query(records: List[Record], query: QueryRequest) -> List[Record]:
    """过滤 → 搜索 → 排序"""
    rows = filter_records(records, query.filters)
    rows = search_records(rows, query.search)
    return sort_records(rows, query.sort)


@app.get("/")
async def root():
    """根路径"""
    return {
        "name": "DataCollab",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health():
    """健康检查"""
    return {"status": "healthy"}


# ---------- 认证 ----------

@app.post("/auth/register", response_model=PublicUser, status_code=201)
async def register(request: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    """注册用户"""
    return auth.register(name=request.name, email=request.email, password=request.password)


@app.post("/auth/login", response_model=LoginResponse)
async def login(request: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """登录，返回会话令牌"""
    token, user = auth.login(request.email, request.password)
    return LoginResponse(token=token, user=user)


@app.post("/auth/logout")
async def logout(
    authorization: Optional[str] = Header(None),
    auth: AuthService = Depends(get_auth_service)
):
    """注销"""
    return {"success": auth.logout(_bearer_token(authorization) or "")}


@app.get("/auth/me", response_model=PublicUser)
async def me(user: PublicUser = Depends(get_current_user)):
    """当前用户"""
    return user


# ---------- 项目 ----------

@app.get("/projects", response_model=List[ProjectSummary])
async def list_projects(
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """当前用户参与的项目"""
    return [
        ProjectSummary(
            id=p.id,
            name=p.name,
            description=p.description,
            created_by=p.created_by,
            collaborators=p.collaborators,
            row_count=len(p.data),
            visualization_count=len(p.visualizations)
        )
        for p in projects.list_projects(user)
    ]


@app.post("/projects", response_model=Project, status_code=201)
async def create_project(
    request: ProjectCreate,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """创建项目"""
    return projects.create_project(user, name=request.name, description=request.description)


@app.get("/projects/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """项目详情"""
    return projects.get_project(user, project_id)


@app.patch("/projects/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    request: ProjectUpdate,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """更新项目"""
    return projects.update_project(user, project_id, name=request.name, description=request.description)


@app.delete("/projects/{project_id}")
async def delete_project(
    project_id: str,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """删除项目"""
    return {"success": projects.delete_project(user, project_id)}


@app.post("/projects/{project_id}/collaborators", response_model=Project)
async def add_collaborator(
    project_id: str,
    request: CollaboratorRequest,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """添加协作者"""
    return projects.add_collaborator(user, project_id, request.user_id)


# ---------- 数据 ----------

@app.post("/projects/{project_id}/data", response_model=UploadResponse)
async def upload_data(
    project_id: str,
    file: UploadFile = File(...),
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """
    上传数据文件

    支持格式：CSV (.csv，首行为表头)、JSON (.json，扁平对象数组)
    """
    log.info(f"接收文件上传: {file.filename} → 项目 {project_id}")

    content = await file.read()
    size = len(content)

    max_size = settings.max_upload_size_mb * 1024 * 1024
    if size > max_size:
        raise HTTPException(
            status_code=400,
            detail=f"文件大小超过限制: {size} > {max_size}"
        )

    records = parse_file(file.filename, content)
    projects.add_data(user, project_id, records)

    return UploadResponse(
        project_id=project_id,
        filename=file.filename,
        size_bytes=size,
        row_count=len(records),
        types=infer_types(records)
    )


@app.get("/projects/{project_id}/schema", response_model=DatasetSchema)
async def get_schema(
    project_id: str,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """字段类型与示例值"""
    records = _project_records(project_id, user, projects)
    types = infer_types(records)
    return DatasetSchema(
        project_id=project_id,
        row_count=len(records),
        columns=[
            ColumnSchema(name=field, type=field_type, example_values=present_values(records, field)[:3])
            for field, field_type in types.items()
        ]
    )


@app.get("/projects/{project_id}/stats")
async def get_stats(
    project_id: str,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """字段描述统计"""
    records = _project_records(project_id, user, projects)
    return {
        field: stats.model_dump(exclude_none=True)
        for field, stats in summarize(records).items()
    }


@app.post("/projects/{project_id}/query", response_model=Page)
async def query_data(
    project_id: str,
    query: QueryRequest,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """表格查询：过滤、搜索、排序与分页"""
    rows = _apply_query(_project_records(project_id, user, projects), query)
    page_size = min(query.page_size or settings.default_page_size, settings.max_page_size)
    return paginate(rows, query.page, page_size)


@app.post("/projects/{project_id}/export")
async def export_data(
    project_id: str,
    query: QueryRequest,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """导出当前表格视图为 CSV"""
    rows = _apply_query(_project_records(project_id, user, projects), query)
    return Response(
        content=records_to_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="export_data.csv"'}
    )


@app.post("/projects/{project_id}/aggregate", response_model=AggregateResponse)
async def aggregate_data(
    project_id: str,
    spec: AggregationSpec,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """分组聚合"""
    rows = aggregate(_project_records(project_id, user, projects), spec)
    return AggregateResponse(rows=rows, row_count=len(rows))


# ---------- 可视化 ----------

@app.post("/projects/{project_id}/visualizations", response_model=Visualization, status_code=201)
async def add_visualization(
    project_id: str,
    spec: VisualizationSpec,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """保存可视化"""
    return projects.add_visualization(user, project_id, spec)


@app.post("/projects/{project_id}/chart", response_model=ChartOutput)
async def preview_chart(
    project_id: str,
    spec: VisualizationSpec,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
    charts: ChartEngine = Depends(get_chart_engine)
):
    """预览图表（不保存）"""
    records = _project_records(project_id, user, projects)
    try:
        return charts.generate(records, spec)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/projects/{project_id}/visualizations/{visualization_id}/chart", response_model=ChartOutput)
async def render_visualization(
    project_id: str,
    visualization_id: str,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
    charts: ChartEngine = Depends(get_chart_engine)
):
    """渲染已保存的可视化"""
    project = projects.get_project(user, project_id)
    visualization = project.get_visualization(visualization_id)
    if visualization is None:
        raise HTTPException(status_code=404, detail="可视化不存在")
    try:
        return charts.generate(project.data, visualization)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ---------- 活动 ----------

@app.get("/projects/{project_id}/activity", response_model=List[Activity])
async def project_activity(
    project_id: str,
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """项目活动记录"""
    return projects.get_activity(user, project_id)


@app.get("/activity", response_model=List[Activity])
async def all_activity(
    user: PublicUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service)
):
    """当前用户可见的全部活动"""
    return projects.get_activity(user)


if __name__ == "__main__":
    import uvicorn

    log.info(f"启动服务: {settings.api_host}:{settings.api_port}")

    uvicorn.run(
        "datacollab.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )
