import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from docshare.core import config
from docshare.core.exceptions import DocShareError, InternalError
from docshare.core.logging_config import setup_logging
from docshare.database import Database
from docshare.routes import auth_routes, document_routes, stats_routes, upload_routes

setup_logging()

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, detail: str | None = None) -> JSONResponse:
    content = {'error': message}
    if detail is not None and config.is_development():
        content['message'] = detail
    return JSONResponse(status_code=status_code, content=content)


async def handle_docshare_error(request: Request, exc: DocShareError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error('Internal error on %s %s: %s', request.method, request.url.path, exc.message)
        return _error_response(exc.status_code, InternalError.default_message, exc.message)
    return _error_response(exc.status_code, exc.message)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get('loc', ())]
        errors.append({
            'msg': str(error.get('msg', 'Invalid value')),
            'param': '.'.join(location[1:]),
            'location': location[0] if location else '',
        })
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={'errors': errors})


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception('Database error on %s %s', request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.default_message, str(exc))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.default_message, str(exc))


def create_app(database: Database | None = None) -> FastAPI:
    app = FastAPI(title='DocShare API')
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    app.add_exception_handler(DocShareError, handle_docshare_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.on_event('startup')
    def open_database() -> None:
        config.validate_runtime_config()
        if app.state.database is None:
            app.state.database = Database()
        try:
            app.state.database.create_schema()
        except SQLAlchemyError:
            logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')
            raise

    @app.on_event('shutdown')
    def close_database() -> None:
        if app.state.database is not None:
            app.state.database.close()

    @app.get('/')
    def root():
        return {'status': 'DocShare API Running'}

    @app.get('/health')
    def health():
        return {'status': 'ok', 'timestamp': datetime.now(timezone.utc).isoformat()}

    app.include_router(auth_routes.router, prefix='/api/auth')
    app.include_router(document_routes.router, prefix='/api/documents')
    app.include_router(upload_routes.router, prefix='/api/upload')
    app.include_router(upload_routes.router, prefix='/api/uploads')
    app.include_router(stats_routes.router, prefix='/api/stats')

    return app


app = create_app()


if __name__ == '__main__':
    import uvicorn

    uvicorn.run('docshare.main:app', host=config.API_HOST, port=config.API_PORT)
