from pathlib import Path
import logging
import sys

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi import FastAPI, Query

from textlab import api_client, config, telemetry
from textlab.api_client import run_request
from textlab.models import RunRequest, SuggestRequest
from textlab.results import ToolError, check_text_size, error, from_exception, success
from textlab.suggestions import SuggestionEngine
from textlab.tool_catalog import ToolRegistry, default_registry

logger = logging.getLogger(__name__)


def _execute_tool(name: str, method: str, path: str, payload: dict | None, fn):
    try:
        result = fn()
    except Exception as e:
        if not isinstance(e, ToolError):
            logger.exception("%s failed", name)
        result = from_exception(e)
    telemetry.record_call(name, method, path, payload, result)
    return result


def create_app(registry: ToolRegistry | None = None, runner=None) -> FastAPI:
    registry = registry if registry is not None else default_registry()
    engine = SuggestionEngine(registry)
    app = FastAPI(title="CleanTextLab suggestion service")

    @app.get("/health")
    def health():
        return _execute_tool("health", "GET", "/health", None, lambda: success(tools=len(registry)))

    @app.get("/tools/list")
    def tools_list():
        return success(
            api_key_configured=config.has_api_key(),
            categories=registry.categories(),
            tools=[tool.model_dump() for tool in registry.all()],
        )

    @app.get("/tools/{tool_id}")
    def tool_detail(tool_id: str):
        tool = registry.get(tool_id)
        if tool is None:
            return error("not_found", f"Unknown tool: {tool_id}")
        return success(tool=tool.model_dump())

    def _suggest(req: SuggestRequest) -> dict:
        check_text_size(req.text)
        suggestions = engine.detect(req.text, req.current_tool_id)
        telemetry.record_suggestions(suggestions)
        return success(suggestions=[s.model_dump() for s in suggestions])

    @app.post("/suggest")
    def suggest(req: SuggestRequest):
        payload = req.model_dump()
        return _execute_tool("suggest", "POST", "/suggest", payload, lambda: _suggest(req))

    def _run(req: RunRequest) -> dict:
        check_text_size(req.input)
        return run_request(registry, req.input, steps=req.steps, tool_id=req.tool_id, runner=runner or api_client.run_tool)

    @app.post("/run")
    def run(req: RunRequest):
        payload = req.model_dump()
        return _execute_tool("run", "POST", "/run", payload, lambda: _run(req))

    @app.get("/telemetry/history")
    def telemetry_history(offset: int = Query(0, ge=0), limit: int = Query(20, ge=1, le=100)):
        return {"ok": True, **telemetry.get_call_history(offset=offset, limit=limit)}

    @app.get("/telemetry/error_counters")
    def telemetry_error_counters():
        return {"ok": True, "error_counters": telemetry.get_error_counters()}

    @app.get("/telemetry/suggestions")
    def telemetry_suggestions():
        return {"ok": True, "suggestion_counters": telemetry.get_suggestion_counters()}

    return app


def main() -> None:
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(create_app(), host=config.TEXTLAB_HOST, port=config.TEXTLAB_PORT)


if __name__ == "__main__":
    main()
