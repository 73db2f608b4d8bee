from contextlib import asynccontextmanager

import httpx
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import router as default_api_router
from .build import BuildInvoker, run_build, verify_build_artifacts
from .config import Mode, ServerConfig, load_config
from .dev_server import DevServerProxy
from .error_boundary import error_boundary
from .middleware import CanonicalHostMiddleware, SecurityHeadersMiddleware
from .static_files import mount_frontend


def create_app(
    config: ServerConfig | None = None,
    api_router: APIRouter | None = None,
    build: BuildInvoker = run_build,
    dev_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Assemble the application for the configured mode.

    In production the build output is verified (and built if needed) before
    the application object exists, so no request can be served without an
    entry document. Raises ``StartupError`` subclasses on failure.
    """
    config = config or load_config()
    mode = config.mode

    dev_proxy = None
    if mode == Mode.PRODUCTION:
        verify_build_artifacts(config.output_dir, config.entry_document, config.build_command, build=build)
    else:
        dev_proxy = DevServerProxy(config.dev_server_url, api_prefix=config.api_prefix, client=dev_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if dev_proxy is not None:
            await dev_proxy.aclose()

    app = FastAPI(title="SPA Host", lifespan=lifespan)
    app.state.config = config
    app.add_exception_handler(Exception, error_boundary)

    if mode == Mode.DEV:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[config.dev_server_url],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(CanonicalHostMiddleware)
    # added last so it wraps everything, redirects included
    app.add_middleware(SecurityHeadersMiddleware)

    app.include_router(api_router or default_api_router, prefix=config.api_prefix.rstrip("/"))

    if mode == Mode.DEV:
        app.mount("/", dev_proxy, name="dev-server")
    else:
        mount_frontend(app, config)

    return app
