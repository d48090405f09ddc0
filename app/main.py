# app/main.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, load_settings
from .core import ProductIn, ProductUpdate
from .database import JsonFileStore
from .logging_config import configure_logging
from .services import CartService, NotFoundError, ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# ---------------------------
# Dependencies
# ---------------------------
def get_store(request: Request) -> JsonFileStore:
    return request.app.state.store

def get_product_service(store: JsonFileStore = Depends(get_store)) -> ProductService:
    return ProductService(store)

def get_cart_service(store: JsonFileStore = Depends(get_store)) -> CartService:
    return CartService(store)

# ---------------------------
# Product endpoints
# ---------------------------
@router.get("/products")
def list_products(svc: ProductService = Depends(get_product_service)):
    return svc.list()

@router.get("/products/{pid}")
def get_product(pid: str, svc: ProductService = Depends(get_product_service)):
    return svc.get(pid)

@router.post("/products", status_code=201)
def create_product(payload: Optional[ProductIn] = None, svc: ProductService = Depends(get_product_service)):
    # an empty body still creates a record holding only its id
    return svc.create(payload or ProductIn())

@router.put("/products/{pid}")
def update_product(pid: str, payload: Optional[ProductUpdate] = None, svc: ProductService = Depends(get_product_service)):
    return svc.update(pid, payload or ProductUpdate())

@router.delete("/products/{pid}")
def delete_product(pid: str, svc: ProductService = Depends(get_product_service)):
    return svc.remove(pid)

# ---------------------------
# Cart endpoints
# ---------------------------
@router.post("/carts", status_code=201)
def create_cart(svc: CartService = Depends(get_cart_service)):
    return svc.create()

@router.get("/carts/{cid}")
def get_cart_products(cid: str, svc: CartService = Depends(get_cart_service)):
    return svc.get_products(cid)

@router.post("/carts/{cid}/product/{pid}")
def add_product_to_cart(cid: str, pid: str, svc: CartService = Depends(get_cart_service)):
    return svc.add_product(cid, pid)

# ---------------------------
# Error mapping
# ---------------------------
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": exc.message})

async def bad_request_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Cuerpo de la petición inválido", "detail": jsonable_encoder(exc.errors())},
    )

async def server_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Error interno del servidor"})

# ---------------------------
# App factory
# ---------------------------
def create_app(settings: Optional[Settings] = None, store: Optional[JsonFileStore] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="flatstore-api (products & carts on JSON files)")
    app.state.settings = settings
    app.state.store = store or JsonFileStore(settings.data_dir)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(RequestValidationError, bad_request_handler)
    app.add_exception_handler(Exception, server_error_handler)

    app.include_router(router)
    logger.debug("data directory: %s", app.state.store.data_dir.resolve())
    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    logger.info("Servidor escuchando en http://localhost:%s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
