# shop/main.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from shop.api.routes import auth as auth_routes
from shop.api.routes import enchantments as enchantment_routes
from shop.api.routes import items as item_routes
from shop.config import settings
from shop.core.exceptions import DoesNotExistError, InvalidArgumentTypeError, UnexpectedValueError
from shop.database import db
from shop.middleware import add_security_headers, configure_cors

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup checks before serving: warn when the data files the admin panel
    depends on have not been created yet.
    """
    for table in ("users", "enchantments"):
        path = db._file_path(table)
        if not path.exists():
            logger.warning("Table file %s not found - run scripts/init_db.py to seed it.", path)
        else:
            logger.info("Found %s table: %s", table, path)
    Path(settings.image_dir).mkdir(parents=True, exist_ok=True)
    yield
    logger.info("Shutting down Item Shop Admin API")


app = FastAPI(title="Item Shop Admin API", version="0.1.0", lifespan=lifespan)
configure_cors(app)
add_security_headers(app)


# domain errors reach the request boundary uncaught; translate them here
@app.exception_handler(InvalidArgumentTypeError)
async def invalid_argument_type_handler(request: Request, exc: InvalidArgumentTypeError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(UnexpectedValueError)
async def unexpected_value_handler(request: Request, exc: UnexpectedValueError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(DoesNotExistError)
async def does_not_exist_handler(request: Request, exc: DoesNotExistError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


# serve stored item images (ItemOut.image_url points here)
Path(settings.image_dir).mkdir(parents=True, exist_ok=True)
app.mount(item_routes.IMAGE_URL_PREFIX, StaticFiles(directory=settings.image_dir), name="images")

app.include_router(auth_routes.router)
app.include_router(item_routes.router)
app.include_router(item_routes.admin_router)
app.include_router(enchantment_routes.router)
app.include_router(enchantment_routes.admin_router)


@app.get("/", tags=["root"])
async def root():
    return {"status": "ok", "service": "Item Shop Admin API"}
