from __future__ import annotations

import traceback
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blog_platform import __version__
from blog_platform.auth.crud import bootstrap_admin_if_needed
from blog_platform.config import Config, check_config, load_config
from blog_platform.errors import BlogError, InternalError
from blog_platform.store import Store, open_store

from . import routes_auth, routes_categories, routes_posts


def _debug(msg: str) -> None:
    print(f"[api] {msg}")


def _error_response(err: BlogError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if err.status_code == 401 else None
    return JSONResponse(status_code=err.status_code, content=err.to_body(), headers=headers)


def _request_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    """FastAPI's body/query errors, reshaped into the API's `{field, msg}` list."""
    out: List[Dict[str, str]] = []
    for e in exc.errors():
        # ("body", 12) for broken JSON, ("query", "page") etc. otherwise
        loc = [x for x in e.get("loc", ()) if isinstance(x, str) and x not in ("body", "query", "path")]
        out.append({"field": loc[-1] if loc else "body", "msg": str(e.get("msg") or "Invalid value")})
    return out


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(BlogError)
    async def _blog_error(request: Request, exc: BlogError) -> JSONResponse:
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _request_invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"success": False, "errors": _request_errors(exc)})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        # Details go to the server log only.
        _debug(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
        _debug("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
        return _error_response(InternalError())


def create_app(cfg: Optional[Config] = None, store: Optional[Store] = None) -> FastAPI:
    """Build the API.

    `cfg` defaults to the environment (and refuses to start without a JWT
    secret); `store` defaults to whatever `cfg.STORE_BACKEND` selects.
    """
    cfg = check_config(cfg) if cfg is not None else load_config()
    store = store if store is not None else open_store(cfg)

    app = FastAPI(title="Blog Platform API", version=__version__)
    app.state.cfg = cfg
    app.state.store = store

    # CORS is mainly needed for local development (Vite on :5173 -> API on :8000).
    cors_origins = [o.strip() for o in (cfg.CORS_ALLOW_ORIGINS or "").split(",") if o.strip()]
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    _install_error_handlers(app)

    prefix = (cfg.API_PREFIX or "").rstrip("/")
    app.include_router(routes_auth.router, prefix=prefix)
    app.include_router(routes_posts.router, prefix=prefix)
    app.include_router(routes_categories.router, prefix=prefix)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok", "store": store.name}

    boot = bootstrap_admin_if_needed(store, cfg)
    if boot:
        _debug(f"Bootstrapped initial admin user: email={boot.get('email')} role={boot.get('role')}")

    _debug(f"App ready (store={store.name}, prefix={prefix or '/'})")
    return app
