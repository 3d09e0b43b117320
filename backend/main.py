"""MetaScope API – FastAPI app and endpoints."""

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ai_service import generate_suggestion
from analysis_service import analyze_url
from config import Settings, get_settings
from database import make_store
from errors import UpstreamFetchError, ValidationError
from schemas import (
    AnalysisResponse,
    AnalyzeRequest,
    GenerateRequest,
    SaveAnalysisRequest,
    StoredAnalysisResponse,
    SuggestionResponse,
)

logger = logging.getLogger(__name__)

_startup_settings = get_settings()
logging.basicConfig(
    level=_startup_settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="MetaScope API",
    description="SEO metadata analyzer",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_startup_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup() -> None:
    settings = get_settings()
    app.state.settings = settings
    app.state.store = make_store(settings)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request):
    return request.app.state.store


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        loc = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"Invalid request: {loc} {errors[0].get('msg', '')}".strip()
    return JSONResponse(status_code=400, content={"error": message})


@app.post("/api/analyze", response_model=AnalysisResponse, response_model_exclude_none=True)
def analyze(
    body: AnalyzeRequest,
    settings: Settings = Depends(get_app_settings),
) -> AnalysisResponse:
    """
    Pipeline: validate url -> fetch HTML -> extract metadata -> audit and score.
    """
    try:
        return analyze_url(body.url, settings)
    except (ValidationError, UpstreamFetchError) as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except Exception:
        logger.exception("Analysis error for %s", body.url)
        raise HTTPException(status_code=500, detail="Failed to analyze URL")


@app.post("/api/generate", response_model=SuggestionResponse)
def generate(
    body: GenerateRequest,
    settings: Settings = Depends(get_app_settings),
) -> SuggestionResponse:
    """Suggest replacement copy. Model failures fall back to fixed text."""
    if not body.type or not body.url:
        raise HTTPException(status_code=400, detail="Type and URL are required")

    suggestion = generate_suggestion(
        kind=body.type,
        url=body.url,
        current_title=body.current_title,
        current_description=body.current_description,
        settings=settings,
    )
    return SuggestionResponse(**suggestion)


@app.post("/api/save-analysis", response_model=StoredAnalysisResponse)
def save_analysis(body: SaveAnalysisRequest, store=Depends(get_store)) -> StoredAnalysisResponse:
    try:
        record = store.save(body.model_dump())
    except Exception:
        logger.exception("Save analysis error for %s", body.url)
        raise HTTPException(status_code=500, detail="Failed to save analysis")
    return StoredAnalysisResponse(**record)


@app.get("/api/analyses/{user_id}", response_model=list[StoredAnalysisResponse])
def get_user_analyses(user_id: int, store=Depends(get_store)) -> list[StoredAnalysisResponse]:
    """Return saved analyses for an owner, newest first."""
    try:
        records = store.list_by_owner(user_id)
    except Exception:
        logger.exception("Get analyses error for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to get analyses")
    return [StoredAnalysisResponse(**r) for r in records]


@app.get("/api/analysis/{analysis_id}", response_model=StoredAnalysisResponse)
def get_analysis(analysis_id: int, store=Depends(get_store)) -> StoredAnalysisResponse:
    try:
        record = store.get(analysis_id)
    except Exception:
        logger.exception("Get analysis error for id %s", analysis_id)
        raise HTTPException(status_code=500, detail="Failed to get analysis")
    if record is None:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return StoredAnalysisResponse(**record)


@app.get("/health")
def health() -> dict:
    """Health check for deployment."""
    return {"status": "ok"}
