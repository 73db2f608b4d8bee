import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath

import anyio.to_thread
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException
from starlette.responses import FileResponse, Response
from starlette.staticfiles import NotModifiedResponse, StaticFiles
from starlette.types import Scope

from .config import ServerConfig
from .content import cache_policy_for, classify
from .errors import ApplicationUnavailableError

logger = logging.getLogger(__name__)


class ResolvedKind(Enum):
    STATIC_FILE = "static_file"
    APPLICATION_SHELL = "application_shell"
    NOT_FOUND_DOCUMENT = "not_found_document"
    PASS_TO_NEXT_HANDLER = "pass_to_next_handler"
    ERROR = "error"


@dataclass(frozen=True)
class Resolution:
    kind: ResolvedKind
    full_path: str = ""
    stat_result: os.stat_result | None = None


def is_api_path(request_path: str, api_prefix: str) -> bool:
    return request_path == api_prefix.rstrip("/") or request_path.startswith(api_prefix)


class SPAStaticFiles(StaticFiles):
    """Serve files from the build output with SPA fallback to the shell document.

    Requests are resolved by ``rules`` in order; the first rule returning a
    resolution wins, otherwise the shell document is served. API-prefixed
    paths are checked first so no file or shell can shadow them.
    """

    def __init__(
        self,
        *,
        directory: str | os.PathLike,
        entry_document: str = "index.html",
        not_found_document: str = "404.html",
        api_prefix: str = "/api/",
    ) -> None:
        super().__init__(directory=directory, check_dir=True)
        self.entry_document = entry_document
        self.not_found_document = not_found_document
        self.api_prefix = api_prefix
        self.rules = (self._match_api_prefix, self._match_static_file)

    def resolve(self, request_path: str, path: str) -> Resolution:
        for rule in self.rules:
            resolution = rule(request_path, path)
            if resolution is not None:
                return resolution
        return Resolution(ResolvedKind.APPLICATION_SHELL)

    async def get_response(self, path: str, scope: Scope) -> Response:
        # filesystem lookups run in a worker thread, as StaticFiles does
        resolution = await anyio.to_thread.run_sync(self.resolve, scope["path"], path)
        if resolution.kind is ResolvedKind.PASS_TO_NEXT_HANDLER:
            raise HTTPException(status_code=404)
        if scope["method"] not in ("GET", "HEAD"):
            raise HTTPException(status_code=405)
        if resolution.kind is ResolvedKind.STATIC_FILE:
            return self.asset_response(resolution.full_path, resolution.stat_result, scope)
        return await self.shell_response(scope)

    def asset_response(
        self,
        full_path: str,
        stat_result: os.stat_result,
        scope: Scope,
        status_code: int = 200,
    ) -> Response:
        mime_type = classify(full_path)
        response = FileResponse(
            full_path,
            status_code=status_code,
            headers=cache_policy_for(mime_type).headers(),
            media_type=mime_type,
            stat_result=stat_result,
        )
        if status_code == 200 and self.is_not_modified(response.headers, Headers(scope=scope)):
            return NotModifiedResponse(response.headers)
        return response

    def resolve_fallback(self) -> Resolution:
        """Pick the shell document, else the not-found document, else an error."""
        shell = self._regular_file(self.entry_document, ResolvedKind.APPLICATION_SHELL)
        if shell is not None:
            return shell

        logger.error("Error serving %s: not found in %s", self.entry_document, self.directory)
        not_found = self._regular_file(self.not_found_document, ResolvedKind.NOT_FOUND_DOCUMENT)
        if not_found is not None:
            return not_found
        return Resolution(ResolvedKind.ERROR)

    async def shell_response(self, scope: Scope) -> Response:
        resolution = await anyio.to_thread.run_sync(self.resolve_fallback)
        if resolution.kind is ResolvedKind.ERROR:
            raise ApplicationUnavailableError("Failed to serve application")
        status_code = 404 if resolution.kind is ResolvedKind.NOT_FOUND_DOCUMENT else 200
        return self.asset_response(resolution.full_path, resolution.stat_result, scope, status_code=status_code)

    def _match_api_prefix(self, request_path: str, path: str) -> Resolution | None:
        if is_api_path(request_path, self.api_prefix):
            return Resolution(ResolvedKind.PASS_TO_NEXT_HANDLER)
        return None

    def _match_static_file(self, request_path: str, path: str) -> Resolution | None:
        # dotfiles are never exposed
        if any(part.startswith(".") for part in PurePosixPath(path).parts if part != "."):
            return None

        full_path, stat_result = self.lookup_path(path)
        if stat_result is None:
            return None
        if stat.S_ISREG(stat_result.st_mode):
            return Resolution(ResolvedKind.STATIC_FILE, full_path, stat_result)
        if stat.S_ISDIR(stat_result.st_mode):
            return self._regular_file(os.path.join(path, self.entry_document))
        return None

    def _regular_file(self, path: str, kind: ResolvedKind = ResolvedKind.STATIC_FILE) -> Resolution | None:
        full_path, stat_result = self.lookup_path(path)
        if stat_result is not None and stat.S_ISREG(stat_result.st_mode):
            return Resolution(kind, full_path, stat_result)
        return None


def mount_frontend(app, config: ServerConfig) -> None:
    app.mount(
        "/",
        SPAStaticFiles(
            directory=config.output_dir,
            entry_document=config.entry_document,
            not_found_document=config.not_found_document,
            api_prefix=config.api_prefix,
        ),
        name="spa",
    )
