"""FastAPI application entrypoint for propscan service mode."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict

try:  # pragma: no cover - optional dependency
    from fastapi import Depends, FastAPI
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    Depends = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..classifier import ErrorPolicy
from ..config import PropScanConfig
from ..errors import ClassificationError, SourceParseError
from ..logging import get_logger
from ..scanner import SourceScanner


class ScanRequest(BaseModel):
    source: str
    path: str = "component.tsx"
    strict: bool = False


class HealthResponse(BaseModel):
    status: str


def _default_config() -> PropScanConfig:
    return PropScanConfig(root=Path.cwd())


def create_app(
    config_factory: Callable[[], PropScanConfig] = _default_config,
) -> FastAPI:
    """Create the FastAPI application exposing props extraction."""

    if not _FASTAPI_AVAILABLE:  # pragma: no cover - validated via unit tests
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install fastapi uvicorn`."
        )

    app = FastAPI(title="propscan service", version="1.0.0")
    logger = get_logger("service")

    async def get_config() -> PropScanConfig:
        return config_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/scan")
    async def scan(
        payload: ScanRequest,
        config: PropScanConfig = Depends(get_config),
    ) -> Dict[str, Any]:
        if payload.strict:
            config = replace(config, error_policy=ErrorPolicy.STRICT)
        scanner = SourceScanner(config, use_cache=False)

        def _run_scan() -> Dict[str, Any]:
            return scanner.scan_source(payload.source, payload.path).to_dict()

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run_scan)
        logger.info("Scanned %s: %d component(s)", payload.path, len(result["components"]))
        return result

    @app.exception_handler(ClassificationError)
    async def classification_error_handler(
        _: Any, exc: ClassificationError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(SourceParseError)
    async def parse_error_handler(
        _: Any, exc: SourceParseError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "0.0.0.0", port: int = 8000) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install fastapi uvicorn`."
        )

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
