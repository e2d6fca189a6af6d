import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from emr.errors import ApplicationError, NotFoundError
from emr.logging_config import setup_logging
from emr.routers import auth
from emr.routers.entities import build_entity_router
from emr.security.headers import install_security_headers
from emr.security.sessions import install_auth_session_middleware
from emr.services.entity_registry import ENTITIES

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title='EMR API')

install_auth_session_middleware(app)
install_security_headers(app)

app.include_router(auth.router)
for entity_config in ENTITIES.values():
    app.include_router(build_entity_router(entity_config))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse({'detail': exc.message}, status_code=status.HTTP_404_NOT_FOUND)


@app.exception_handler(ApplicationError)
async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    logger.info('%s %s rejected: %s', request.method, request.url.path, exc.message)
    return JSONResponse({'detail': exc.message}, status_code=status.HTTP_400_BAD_REQUEST)


@app.get('/health')
def health() -> dict:
    return {'status': 'ok'}
