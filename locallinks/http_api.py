"""HTTP API for Local Links Manager: CSV health reports, lookups and checker writes."""

import logging
from collections.abc import Iterator
from typing import Any, Dict, Generator

from fastapi import Body, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.orm import Session

from locallinks import __version__
from locallinks.config import get_settings
from locallinks.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from locallinks.mcp.serializers import serialize_link, serialize_service_interaction
from locallinks.services.catalog_service import CatalogService
from locallinks.services.link_service import LinkService
from locallinks.storage.database import get_db

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Local Links Manager",
    description="Reachability of local authority service pages",
    version=__version__,
)


def get_session() -> Generator[Session, None, None]:
    """Request-scoped database session."""
    with get_db().session() as session:
        yield session


def _error(status_code: int, exc: Exception, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), **extra})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error(422, exc, field=exc.field)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, exc)


@app.exception_handler(DuplicateError)
async def duplicate_handler(request: Request, exc: DuplicateError):
    return _error(409, exc, field=exc.field)


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError):
    logger.error("Database error serving %s: %s", request.url.path, exc)
    return _error(500, exc)


def _stream_report(method_name: str) -> Iterator[str]:
    """Yield a report's CSV lines from a session that lives as long as the stream."""
    with get_db().session() as session:
        reporter = LinkService(session).reporter
        yield from getattr(reporter, method_name)()


def _csv_response(method_name: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        _stream_report(method_name),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/homepage_links_status.csv")
def homepage_links_status_csv():
    """One row per authority with the health of its homepage."""
    return _csv_response("iter_homepage_links_status", "homepage_links_status.csv")


@app.get("/links_status.csv")
def links_status_csv():
    """One row per link with its status and analytics."""
    return _csv_response("iter_links_status", "links_status.csv")


@app.get("/bad_links_url_and_status.csv")
def bad_links_url_and_status_csv():
    """One row per broken or missing link."""
    return _csv_response("iter_bad_links_url_and_status", "bad_links_url_and_status.csv")


@app.get("/links/{authority_slug}/{service_slug}/{interaction_slug}")
def retrieve_link(
    authority_slug: str,
    service_slug: str,
    interaction_slug: str,
    session: Session = Depends(get_session),
):
    """Resolve a link by authority, service and interaction slugs."""
    link = LinkService(session).retrieve(authority_slug, service_slug, interaction_slug)
    return serialize_link(link)


@app.get("/service_interactions/{lgsl_code}/{lgil_code}")
def find_service_interaction(
    lgsl_code: int, lgil_code: int, session: Session = Depends(get_session)
):
    """Resolve a service interaction by LGSL and LGIL codes."""
    service_interaction = CatalogService(session).find_by_codes(lgsl_code, lgil_code)
    return serialize_service_interaction(service_interaction)


@app.patch("/links/{link_id}")
def update_link(
    link_id: int,
    changes: Dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
):
    """Checker write: update any of a link's URL and diagnostic fields at once."""
    link = LinkService(session).update_link(link_id, **changes)
    return serialize_link(link)


@app.post("/links/{link_id}/missing")
def make_link_missing(link_id: int, session: Session = Depends(get_session)):
    """Mark a link's page as no longer published."""
    link = LinkService(session).make_missing(link_id)
    return serialize_link(link)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "local-links-manager"}


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(app, host=settings.http_host, port=settings.http_port)
