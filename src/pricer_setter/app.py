from __future__ import annotations

import logging
import time
import uuid
from datetime import date, datetime, timezone
from typing import Annotated, Any, Callable

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import Engine

from .analyzer import ProjectAnalyzer
from .auth import (
    CredentialVerifier,
    LoginRequest,
    TokenService,
    build_token_service,
    build_verifier,
)
from .catalog_store import PriceCatalogStore
from .classifier import RequirementClassifier
from .config import Settings
from .database import build_engine, init_db
from .llm import LLMAdapter, build_llm_adapter
from .logging_config import set_trace_id
from .models.analysis import AnalysisResult, AnalyzeRequest
from .models.catalog import PriceCatalogEntry, PriceCatalogInput
from .models.quotation import (
    PatternCreate,
    QuotationCreate,
    QuotationRecord,
    QuotationStatusUpdate,
)
from .pricing import PricingResolver
from .project_store import ProjectStore
from .quotation import QuotationAssembler
from .similarity import SimilarityChecker

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_catalog(request: Request) -> PriceCatalogStore:
    return request.app.state.catalog


def get_projects(request: Request) -> ProjectStore:
    return request.app.state.projects


def get_analyzer(request: Request) -> ProjectAnalyzer:
    return request.app.state.analyzer


def require_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> dict[str, Any]:
    tokens: TokenService = request.app.state.tokens
    claims = tokens.verify(credentials.credentials) if credentials else None
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


CatalogDep = Annotated[PriceCatalogStore, Depends(get_catalog)]
ProjectsDep = Annotated[ProjectStore, Depends(get_projects)]
AnalyzerDep = Annotated[ProjectAnalyzer, Depends(get_analyzer)]


auth_router = APIRouter()
router = APIRouter(dependencies=[Depends(require_token)])


@auth_router.post("/login")
def login(payload: LoginRequest, request: Request) -> dict[str, Any]:
    verifier: CredentialVerifier = request.app.state.verifier
    missing = [name for name in verifier.required_fields if not getattr(payload, name)]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing required fields: {', '.join(missing)}",
        )
    subject = verifier.verify(payload)
    if subject is None:
        logger.info("Login rejected", extra={"username": payload.username})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = request.app.state.tokens.issue(subject)
    return {"success": True, "token": token, "username": subject}


@router.post("/analyze", response_model=AnalysisResult)
def analyze(payload: AnalyzeRequest, analyzer: AnalyzerDep):
    try:
        return analyzer.analyze(payload.requirement, payload.is_student)
    except Exception as exc:
        logger.error("Analysis failed", exc_info=True, extra={"error": str(exc)})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": str(exc), "modules": [], "total": 0},
        )


@router.post("/quotations")
def save_quotation(payload: QuotationCreate, projects: ProjectsDep) -> dict[str, Any]:
    try:
        quotation_id = projects.save_quotation(payload)
    except Exception as exc:
        logger.error("Failed to save quotation", exc_info=True)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"success": True, "id": quotation_id}


@router.get("/quotations", response_model=list[QuotationRecord])
def list_quotations(projects: ProjectsDep) -> list[QuotationRecord]:
    return projects.list_quotations()


@router.get("/quotations/{quotation_id}", response_model=QuotationRecord)
def get_quotation(quotation_id: int, projects: ProjectsDep) -> QuotationRecord:
    record = projects.get_quotation(quotation_id)
    if not record:
        raise HTTPException(status_code=404, detail="Quotation not found")
    return record


@router.patch("/quotations/{quotation_id}/status")
def update_quotation_status(
    quotation_id: int, payload: QuotationStatusUpdate, projects: ProjectsDep
) -> dict[str, Any]:
    if not projects.update_quotation_status(quotation_id, payload.status):
        raise HTTPException(status_code=404, detail="Quotation not found")
    return {"success": True}


@router.post("/patterns")
def save_pattern(payload: PatternCreate, projects: ProjectsDep) -> dict[str, Any]:
    try:
        pattern_id = projects.save_pattern(payload)
    except Exception as exc:
        logger.error("Failed to save project pattern", exc_info=True)
        raise HTTPException(status_code=500, detail=str(exc))
    return {"success": True, "id": pattern_id}


@router.get("/pricing-data", response_model=list[PriceCatalogEntry])
def list_pricing_data(catalog: CatalogDep) -> list[PriceCatalogEntry]:
    return catalog.list_entries()


@router.post("/pricing-data")
def add_pricing_entry(payload: PriceCatalogInput, catalog: CatalogDep) -> dict[str, Any]:
    return {"success": True, "id": catalog.add_entry(payload)}


@router.get("/pricing-data/{entry_id}", response_model=PriceCatalogEntry)
def get_pricing_entry(entry_id: int, catalog: CatalogDep) -> PriceCatalogEntry:
    entry = catalog.get_entry(entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Pricing entry not found")
    return entry


@router.put("/pricing-data/{entry_id}")
def update_pricing_entry(entry_id: int, payload: PriceCatalogInput, catalog: CatalogDep) -> dict[str, Any]:
    if not catalog.update_entry(entry_id, payload):
        raise HTTPException(status_code=404, detail="Pricing entry not found")
    return {"success": True}


@router.delete("/pricing-data/{entry_id}")
def delete_pricing_entry(entry_id: int, catalog: CatalogDep) -> dict[str, Any]:
    if not catalog.delete_entry(entry_id):
        raise HTTPException(status_code=404, detail="Pricing entry not found")
    return {"success": True}


def create_app(
    settings: Settings,
    *,
    engine: Engine | None = None,
    llm_adapter: LLMAdapter | None = None,
    verifier: CredentialVerifier | None = None,
    today: Callable[[], date] = date.today,
    seed_catalog: bool = True,
) -> FastAPI:
    """Build the API with its engine, LLM client and stores wired in once."""
    engine = engine or build_engine(settings.database_url)
    init_db(engine)

    catalog = PriceCatalogStore(engine)
    if seed_catalog:
        catalog.seed()
    projects = ProjectStore(engine)
    adapter = llm_adapter or build_llm_adapter(settings)

    app = FastAPI(title="PricerSetter API", version="0.1.0")
    app.state.settings = settings
    app.state.engine = engine
    app.state.catalog = catalog
    app.state.projects = projects
    app.state.verifier = verifier or build_verifier(settings, engine)
    app.state.tokens = build_token_service(settings)
    app.state.analyzer = ProjectAnalyzer(
        classifier=RequirementClassifier(adapter),
        resolver=PricingResolver(catalog),
        similarity=SimilarityChecker(adapter, projects),
        assembler=QuotationAssembler(today=today),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        set_trace_id(request.headers.get("X-Cloud-Trace-Context") or str(uuid.uuid4()))
        start_time = time.time()
        response = await call_next(request)
        logger.info(
            "Handled request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 1),
            },
        )
        return response

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(router, prefix="/api", tags=["pricing"])

    @app.get("/health")
    async def healthcheck() -> JSONResponse:
        return JSONResponse({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})

    return app


__all__ = ["create_app"]
