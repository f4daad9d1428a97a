import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from coursify.core import config
from coursify.core.errors import CoursifyError
from coursify.core.rate_limit import TokenBucketRateLimiter
from coursify.database import Base, engine, ensure_schema
from coursify.models import course, enrollment, material, user  # noqa: F401  # register tables
from coursify.routes import admin_routes, auth_routes, course_routes, instructor_routes

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
    )


def build_rate_limiter() -> TokenBucketRateLimiter:
    return TokenBucketRateLimiter(
        capacity=config.RATE_LIMIT_CAPACITY,
        refill_seconds=config.RATE_LIMIT_REFILL_SECONDS,
        idle_seconds=config.RATE_LIMIT_IDLE_SECONDS,
    )


configure_logging()

app = FastAPI(title='Coursify API', version='1.0.0')
app.state.rate_limiter = build_rate_limiter()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.exception_handler(CoursifyError)
async def handle_domain_error(request: Request, exc: CoursifyError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error('Request %s %s failed: %s', request.method, request.url.path, exc.detail, exc_info=exc)
    else:
        logger.info('Request %s %s -> %s %s', request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={'detail': exc.detail})


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': 'Invalid request body', 'errors': jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def handle_storage_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error('Storage failure on %s %s', request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': 'Internal server error'},
    )


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and Postgres credentials.')


@app.get('/')
def root():
    return {'status': 'Coursify API Running'}


app.include_router(auth_routes.router, prefix='/api')
app.include_router(course_routes.router, prefix='/api')
app.include_router(instructor_routes.router, prefix='/api/instructor')
app.include_router(admin_routes.router, prefix='/api/admin')
