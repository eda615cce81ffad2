import os

# Bind to localhost by default; override with TEXTLAB_HOST (e.g. 0.0.0.0) if needed.
TEXTLAB_HOST = os.environ.get("TEXTLAB_HOST", "127.0.0.1")
TEXTLAB_PORT = int(os.environ.get("TEXTLAB_PORT", 8000))

# CleanTextLab API used to actually run a tool on the text
TEXTLAB_API_BASE = os.environ.get("TEXTLAB_API_BASE", "https://cleantextlab.com/api/v1")
TEXTLAB_API_KEY = os.environ.get("TEXTLAB_API_KEY") or os.environ.get("CLEANTEXTLAB_API_KEY") or ""
TEXTLAB_API_TIMEOUT_S = float(os.environ.get("TEXTLAB_API_TIMEOUT_S", 15))

# Optional JSON file replacing the built-in tool catalog
TEXTLAB_TOOLS_FILE = os.environ.get("TEXTLAB_TOOLS_FILE", "").strip() or None

# Largest text accepted by the HTTP and MCP surfaces
TEXTLAB_MAX_TEXT_CHARS = int(os.environ.get("TEXTLAB_MAX_TEXT_CHARS", 1_000_000))


def has_api_key() -> bool:
    return bool(TEXTLAB_API_KEY.strip())
