import html
import logging
from pathlib import Path
from typing import Union

import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles

logger = logging.getLogger(__name__)


def render_listing(path: Path, base: Path) -> str:
    items = []
    for entry in sorted(path.iterdir()):
        rel = entry.relative_to(base).as_posix()
        items.append(f'<li><a href="/static/{html.escape(rel, quote=True)}">{html.escape(entry.name)}</a></li>')
    return "<html><body><ul>" + "".join(items) + "</ul></body></html>"


def serve_path(path: Path, base: Path) -> Response:
    logger.info("Reading path %s", path)
    if path.is_dir():
        try:
            return HTMLResponse(render_listing(path, base))
        except OSError as e:
            logger.warning("Failed to read directory: %s", e)
            return PlainTextResponse(f"Failed to read directory: {e}", status_code=500)
    try:
        content = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read file: %s", e)
        return PlainTextResponse(f"Failed to read file: {e}", status_code=500)
    logger.info("Read %d bytes", len(content))
    return PlainTextResponse(content)


def create_app(path: Union[str, Path]) -> FastAPI:
    base = Path(path).resolve()
    app = FastAPI(title="rcli http serve", docs_url=None, redoc_url=None, openapi_url=None)
    app.mount("/static", StaticFiles(directory=base), name="static")

    @app.get("/")
    def root():
        return serve_path(base, base)

    @app.get("/{file_path:path}")
    def file_handler(file_path: str):
        p = (base / file_path).resolve()
        if (p != base and base not in p.parents) or not p.exists():
            return PlainTextResponse(f"File {file_path} not found", status_code=404)
        return serve_path(p, base)

    return app


def process_http_serve(path: Union[str, Path], port: int, host: str = "0.0.0.0") -> None:
    logger.info("Serving %s on %s:%d", path, host, port)
    uvicorn.run(create_app(path), host=host, port=port)
