import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional

from textlab.mcp_transport import MCPTransport
from textlab.results import ToolError
from textlab.tool_catalog import load_registry

SERVER_NAME = "textlab-suggest"
SERVER_VERSION = "0.1.0"
PROTOCOL_VERSION = "2024-11-05"

logger = logging.getLogger(__name__)


def _read_message(stdin) -> Optional[Dict[str, Any]]:
    headers = {}
    while True:
        line = stdin.readline()
        if not line:
            return None
        if line in (b"\r\n", b"\n"):
            break
        try:
            key, value = line.decode("utf-8").split(":", 1)
        except (UnicodeDecodeError, ValueError):
            continue
        headers[key.strip().lower()] = value.strip()
    try:
        content_length = int(headers.get("content-length", "0"))
    except ValueError:
        return None
    if content_length <= 0:
        return None
    body = stdin.read(content_length)
    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        logger.warning("Dropping malformed MCP message")
        return {}


def _send_message(stdout, obj: Dict[str, Any]) -> None:
    data = json.dumps(obj, ensure_ascii=True).encode("utf-8")
    header = f"Content-Length: {len(data)}\r\n\r\n".encode("utf-8")
    stdout.write(header)
    stdout.write(data)
    stdout.flush()


def serve(transport: MCPTransport, stdin, stdout) -> None:
    while True:
        req = _read_message(stdin)
        if req is None:
            break
        if not isinstance(req, dict) or not req:
            continue
        resp = transport.handle_request(req)
        if resp:
            _send_message(stdout, resp)
        if req.get("method") == "shutdown":
            break


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="MCP stdio server for CleanTextLab tool suggestions")
    parser.add_argument("--tools-file", help="JSON tool catalog to use instead of the built-in one")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)
    try:
        registry = load_registry(args.tools_file)
    except ToolError as exc:
        print(exc.message, file=sys.stderr)
        raise SystemExit(2)

    transport = MCPTransport(
        registry=registry,
        server_name=SERVER_NAME,
        server_version=SERVER_VERSION,
        protocol_version=PROTOCOL_VERSION,
    )
    serve(transport, sys.stdin.buffer, sys.stdout.buffer)


if __name__ == "__main__":
    main()
