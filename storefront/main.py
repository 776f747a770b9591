# storefront/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Cookie, Depends, FastAPI, Header, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from .auth import ADMIN_COOKIE, AdminTokenStore, hash_password, token_from_headers, verify_password
from .config import Settings, configure_logging
from .db import SqlOrderRepository
from .errors import InvalidCredentials, StorefrontError, Unauthorized
from .ratelimit import SlidingWindowRateLimiter, client_key
from .repository import JsonOrderRepository, OrderRepository
from .service import OrderService

logger = logging.getLogger(__name__)


def build_repository(settings: Settings) -> OrderRepository:
    if settings.orders_database_url:
        return SqlOrderRepository(settings.orders_database_url)
    return JsonOrderRepository(settings.data_file)


# -------------------
# Request helpers
# -------------------
async def read_body(request: Request) -> Dict[str, Any]:
    """JSON or url-encoded body as a dict; anything else is {}."""
    ctype = (request.headers.get("content-type") or "").lower()
    if ctype.startswith("application/x-www-form-urlencoded") or ctype.startswith("multipart/form-data"):
        form = await request.form()
        return dict(form)
    raw = await request.body()
    if not raw:
        return {}
    try:
        v = await request.json()
    except ValueError:
        return {}
    return v if isinstance(v, dict) else {}


def get_service(request: Request) -> OrderService:
    return request.app.state.service


def get_tokens(request: Request) -> AdminTokenStore:
    return request.app.state.tokens


def require_admin(
    authorization: str | None = Header(default=None),
    admin_token: str | None = Cookie(default=None),
    tokens: AdminTokenStore = Depends(get_tokens),
) -> str:
    token = token_from_headers(authorization, admin_token)
    if not tokens.is_valid(token):
        raise Unauthorized()
    return token


def request_client(request: Request) -> str:
    remote = request.client.host if request.client else None
    return client_key(request.headers.get("x-forwarded-for"), remote)


# -------------------
# App factory
# -------------------
def create_app(settings: Optional[Settings] = None, repository: Optional[OrderRepository] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        repo = repository or build_repository(settings)
        limiter = SlidingWindowRateLimiter(
            window=settings.rate_limit_window_seconds,
            limit=settings.rate_limit_max_posts,
            max_entries=settings.rate_limit_max_entries,
        )
        app.state.settings = settings
        app.state.admin_password_hash = hash_password(settings.admin_password)
        app.state.tokens = AdminTokenStore(ttl=settings.admin_token_ttl_seconds)
        app.state.rate_limiter = limiter
        app.state.service = OrderService(repo, limiter)
        yield
        app.state.tokens.clear()
        limiter.reset()
        repo.close()

    app = FastAPI(
        title="Storefront Orders API",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    # -------------------
    # Health
    # -------------------
    @app.get("/")
    def root():
        return {"ok": True, "service": "storefront-api"}

    # Block direct access to the data folder
    @app.api_route("/data", methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"])
    @app.api_route("/data/{path:path}", methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"])
    def data_blocked(path: str = ""):
        return PlainTextResponse("Not found", status_code=404)

    # -------------------
    # Admin auth
    # -------------------
    @app.post("/api/admin/login")
    def login(
        request: Request,
        response: Response,
        body: Dict[str, Any] = Depends(read_body),
        tokens: AdminTokenStore = Depends(get_tokens),
    ):
        password = body.get("password")
        if not isinstance(password, str) or not verify_password(password, request.app.state.admin_password_hash):
            logger.warning("admin login failed from %s", request_client(request))
            raise InvalidCredentials()

        token = tokens.issue()
        # Cookie for the admin page; API clients can use the Bearer header instead
        response.set_cookie(key=ADMIN_COOKIE, value=token, httponly=True, samesite="lax", path="/")
        logger.info("admin login from %s", request_client(request))
        return {"token": token}

    @app.post("/api/admin/logout")
    def logout(
        response: Response,
        token: str = Depends(require_admin),
        tokens: AdminTokenStore = Depends(get_tokens),
    ):
        tokens.revoke(token)
        response.delete_cookie(ADMIN_COOKIE, path="/")
        return {"ok": True}

    # -------------------
    # Orders
    # -------------------
    @app.get("/api/orders", dependencies=[Depends(require_admin)])
    def list_orders(service: OrderService = Depends(get_service)):
        return service.list_orders()

    @app.get("/api/orders/{order_id}")
    def get_order(order_id: str, service: OrderService = Depends(get_service)):
        return service.get(order_id)

    @app.post("/api/orders", status_code=201)
    def create_order(
        request: Request,
        body: Dict[str, Any] = Depends(read_body),
        service: OrderService = Depends(get_service),
    ):
        return service.create(body, client=request_client(request))

    @app.patch("/api/orders/{order_id}", dependencies=[Depends(require_admin)])
    def update_order(
        order_id: str,
        body: Dict[str, Any] = Depends(read_body),
        service: OrderService = Depends(get_service),
    ):
        return service.update_status(order_id, body.get("status"))

    @app.delete("/api/orders/{order_id}", dependencies=[Depends(require_admin)])
    def delete_order(order_id: str, service: OrderService = Depends(get_service)):
        return service.delete(order_id)

    return app


def run() -> None:
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
