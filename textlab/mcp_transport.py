import json
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from . import api_client, telemetry
from .models import RunRequest, SuggestRequest
from .results import check_text_size, from_exception, success
from .suggestions import SuggestionEngine
from .tool_catalog import ToolRegistry


class MCPTransport:
    """MCP JSON-RPC handling for the suggestion engine and the tool runner."""

    def __init__(
        self,
        *,
        registry: ToolRegistry,
        server_name: str,
        server_version: str,
        protocol_version: str,
        runner: Optional[Callable[..., Dict[str, Any]]] = None,
    ) -> None:
        self.server_name = server_name
        self.server_version = server_version
        self.protocol_version = protocol_version
        self._registry = registry
        self._engine = SuggestionEngine(registry)
        self._runner = runner
        self._tools: Dict[str, Dict[str, Any]] = {
            "suggest": {
                "description": "Suggest up to three CleanTextLab tools for a piece of text",
                "inputSchema": SuggestRequest.model_json_schema(),
                "handler": self._call_suggest,
            },
            "tools.list": {
                "description": "List every CleanTextLab tool with its category",
                "inputSchema": {"type": "object", "properties": {}},
                "handler": self._call_tools_list,
            },
            "run": {
                "description": "Run text through a CleanTextLab tool via the remote API",
                "inputSchema": RunRequest.model_json_schema(),
                "handler": self._call_run,
            },
        }

    def _error(self, req_id: Any, code: int, message: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        err: Dict[str, Any] = {"code": code, "message": message}
        if data is not None:
            err["data"] = data
        return {"jsonrpc": "2.0", "id": req_id, "error": err}

    def _call_suggest(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        req = SuggestRequest.model_validate(arguments)
        check_text_size(req.text)
        suggestions = self._engine.detect(req.text, req.current_tool_id)
        telemetry.record_suggestions(suggestions)
        return success(suggestions=[s.model_dump() for s in suggestions])

    def _call_tools_list(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return success(
            categories=self._registry.categories(),
            tools=[{"id": t.id, "name": t.name, "category": t.category} for t in self._registry.all()],
        )

    def _call_run(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        req = RunRequest.model_validate(arguments)
        check_text_size(req.input)
        return api_client.run_request(
            self._registry,
            req.input,
            steps=req.steps,
            tool_id=req.tool_id,
            runner=self._runner or api_client.run_tool,
        )

    def _tools_list(self) -> Dict[str, Any]:
        tools = [
            {"name": name, "description": tool["description"], "inputSchema": tool["inputSchema"]}
            for name, tool in self._tools.items()
        ]
        return {"tools": tools}

    def _validate_tool_call_params(self, params: Dict[str, Any]) -> Optional[str]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            return "tools/call params must include a non-empty string `name`."
        arguments = params.get("arguments")
        if arguments is not None and not isinstance(arguments, dict):
            return "tools/call `arguments` must be an object when provided."
        return None

    def _tools_call(self, params: Dict[str, Any], req_id: Any) -> Dict[str, Any]:
        invalid_reason = self._validate_tool_call_params(params)
        if invalid_reason:
            return self._error(req_id, -32602, "Invalid params", {"reason": invalid_reason})

        name = params["name"]
        arguments = params.get("arguments") or {}
        tool = self._tools.get(name)
        if not tool:
            return self._error(req_id, -32602, "Tool not found", {"name": name})

        try:
            result = tool["handler"](arguments)
        except ValidationError as exc:
            return self._error(req_id, -32602, "Invalid params", {"reason": str(exc)})
        except Exception as exc:
            result = from_exception(exc)
        telemetry.record_call(name, "MCP", "tools/call", arguments, result)

        if not result.get("ok", True):
            return self._error(req_id, -32010, "Tool call failed", {"tool": name, "result": result})

        response = {"content": [{"type": "text", "text": json.dumps(result, ensure_ascii=True)}]}
        return {"jsonrpc": "2.0", "id": req_id, "result": response}

    def handle_request(self, req: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        method = req.get("method")
        req_id = req.get("id")
        params = req.get("params") or {}

        if method == "initialize":
            result = {
                "protocolVersion": self.protocol_version,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": self.server_name, "version": self.server_version},
            }
            return {"jsonrpc": "2.0", "id": req_id, "result": result}

        if method == "notifications/initialized":
            return None

        if method == "tools/list":
            return {"jsonrpc": "2.0", "id": req_id, "result": self._tools_list()}

        if method == "tools/call":
            return self._tools_call(params, req_id)

        if method in ("ping", "shutdown"):
            return {"jsonrpc": "2.0", "id": req_id, "result": {}}

        if req_id is None:
            return None
        return self._error(req_id, -32601, "Method not found", {"method": method})
