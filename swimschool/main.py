import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from swimschool.core.config import FRONTEND_URL, LOG_LEVEL
from swimschool.core.database import connect_to_mongo, close_mongo_connection, ensure_indexes
from swimschool.core.errors import DomainError
from swimschool.modules.auth.router import auth_router, admin_router
from swimschool.modules.users.router import user_router
from swimschool.modules.classes.router import class_router
from swimschool.modules.products.router import product_router
from swimschool.modules.registrations.router import registration_router
from swimschool.modules.payments.router import payment_router, paycallback_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("swimschool")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await connect_to_mongo()
    await ensure_indexes()
    yield
    # Shutdown
    await close_mongo_connection()


app = FastAPI(title="Swim School API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "code": exc.code.value, "message": exc.message},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "message": "Server error"})


@app.get("/")
async def root():
    return {"message": "Swim School API"}


app.include_router(auth_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(user_router, prefix="/api")
app.include_router(class_router, prefix="/api")
app.include_router(product_router, prefix="/api")
app.include_router(registration_router, prefix="/api")
app.include_router(payment_router, prefix="/api")
app.include_router(paycallback_router, prefix="/api")
