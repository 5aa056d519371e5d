"""Health check endpoints: service status and a database-only probe."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import DbHealthResponse, HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
    )


@router.get("/db", response_model=DbHealthResponse)
def get_db_health(db: Session = Depends(get_db)):
    """Run SELECT 1; report the driver error message with a 500 when it fails."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        body = DbHealthResponse(ok=False, error=str(getattr(e, "orig", None) or e)[:500])
        return JSONResponse(status_code=500, content=body.model_dump())
    return DbHealthResponse(ok=True)
