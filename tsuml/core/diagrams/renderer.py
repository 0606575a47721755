"""PlantUML text -> image rendering with dual-mode support.

Primary:  Local JAR via `java -jar plantuml.jar -t<format> -pipe`.
Fallback: PlantUML HTTP server with deflate + custom base64 URL encoding.

Supported output formats are svg, png and txt (ASCII art).

JAR location resolution order:
  1. PLANTUML_JAR_PATH env var (explicit override)
  2. tools/plantuml/plantuml.jar relative to the working directory
"""

import logging
import os
import shutil
import subprocess
import zlib
from pathlib import Path
from typing import Optional

import httpx

from ..constants import PLANTUML_IMAGE_EXTENSIONS
from ..errors import RenderError

logger = logging.getLogger(__name__)

_DEFAULT_JAR_PATH = Path("tools") / "plantuml" / "plantuml.jar"

_DEFAULT_SERVER = "https://www.plantuml.com/plantuml"

_PLANTUML_ALPHABET = (
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-_"
)


# ---------------------------------------------------------------------------
# Local JAR rendering
# ---------------------------------------------------------------------------


def _resolve_jar_path() -> Optional[Path]:
    """Return the PlantUML JAR path if it exists and Java is on PATH."""
    env_path = os.environ.get("PLANTUML_JAR_PATH")
    candidate = Path(env_path) if env_path else _DEFAULT_JAR_PATH
    if not candidate.is_file():
        return None
    if shutil.which("java") is None:
        logger.info("Java not in PATH — PlantUML JAR present but unusable, using HTTP fallback")
        return None
    return candidate


def _looks_rendered(output: bytes, output_format: str) -> bool:
    if output_format == "svg":
        head = output[:500].decode("utf-8", errors="replace")
        return head.lstrip().startswith("<") and "<svg" in head
    if output_format == "png":
        return output.startswith(b"\x89PNG")
    return bool(output.strip())


def _render_via_jar(puml: str, jar_path: Path, output_format: str) -> Optional[bytes]:
    """Render through the local JAR (stdin -> stdout pipe).

    Returns the rendered bytes on success, None on failure (caller falls back).
    """
    cmd = [
        "java",
        "-Djava.awt.headless=true",
        "-jar",
        str(jar_path),
        f"-t{output_format}",
        "-pipe",
    ]

    try:
        result = subprocess.run(
            cmd,
            input=puml.encode("utf-8"),
            capture_output=True,
            timeout=60,
        )
    except subprocess.TimeoutExpired:
        logger.warning("PlantUML JAR timed out after 60s — falling back to HTTP")
        return None
    except OSError as e:
        logger.warning("PlantUML JAR execution failed: %s — falling back to HTTP", e)
        return None

    if _looks_rendered(result.stdout, output_format):
        if result.returncode != 0:
            logger.debug("PlantUML JAR returned exit code %d but produced output — using it", result.returncode)
        return result.stdout

    stderr = result.stderr.decode("utf-8", errors="replace").strip()
    logger.warning(
        "PlantUML JAR produced no %s (exit=%d, stderr=%s) — falling back to HTTP",
        output_format,
        result.returncode,
        stderr[:300] if stderr else "(empty)",
    )
    return None


# ---------------------------------------------------------------------------
# HTTP server rendering
# ---------------------------------------------------------------------------


def _encode6bit(b: int) -> str:
    return _PLANTUML_ALPHABET[b & 0x3F]


def _encode3bytes(b1: int, b2: int, b3: int) -> str:
    """Encode 3 bytes into 4 PlantUML base64 characters."""
    c1 = b1 >> 2
    c2 = ((b1 & 0x3) << 4) | (b2 >> 4)
    c3 = ((b2 & 0xF) << 2) | (b3 >> 6)
    c4 = b3 & 0x3F
    return _encode6bit(c1) + _encode6bit(c2) + _encode6bit(c3) + _encode6bit(c4)


def plantuml_encode(text: str) -> str:
    """Encode PlantUML text using deflate + PlantUML base64 for URL embedding."""
    data = zlib.compress(text.encode("utf-8"))[2:-4]  # raw deflate

    result = []
    for i in range(0, len(data), 3):
        if i + 2 < len(data):
            result.append(_encode3bytes(data[i], data[i + 1], data[i + 2]))
        elif i + 1 < len(data):
            result.append(_encode3bytes(data[i], data[i + 1], 0))
        else:
            result.append(_encode3bytes(data[i], 0, 0))

    return "".join(result)


def build_server_url(puml: str, output_format: str, server_url: Optional[str] = None) -> str:
    server = server_url or os.environ.get("PLANTUML_SERVER_URL", _DEFAULT_SERVER)
    return f"{server.rstrip('/')}/{output_format}/{plantuml_encode(puml)}"


def _render_via_http(puml: str, output_format: str, server_url: Optional[str] = None) -> bytes:
    """Render through a PlantUML server (GET with encoded URL).

    Raises RenderError on failure.
    """
    url = build_server_url(puml, output_format, server_url)
    logger.debug("Rendering PlantUML via HTTP (url len=%d)", len(url))

    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
    except httpx.RequestError as e:
        raise RenderError(f"PlantUML server request failed: {e}") from e

    body = response.content
    if _looks_rendered(body, output_format):
        if response.status_code != 200:
            # The server renders syntax errors into the image with a 400
            logger.warning("PlantUML server returned %d but with %s content — using it", response.status_code, output_format)
        return body

    if response.status_code != 200:
        raise RenderError(f"PlantUML server returned {response.status_code} with no {output_format} body")
    raise RenderError(f"PlantUML server returned unexpected content: {body[:200]!r}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def render_plantuml(puml: str, output_format: str = "svg", server_url: Optional[str] = None) -> bytes:
    """Render PlantUML text to an image or ASCII art.

    Tries the local JAR first, falls back to the HTTP server.

    Args:
        puml: PlantUML source text (including @startuml/@enduml).
        output_format: "svg", "png" or "txt".
        server_url: PlantUML server base URL for the HTTP fallback. Defaults
                    to PLANTUML_SERVER_URL or the public PlantUML server.

    Returns:
        Rendered bytes.

    Raises:
        RenderError: If both JAR and HTTP rendering fail.
    """
    if output_format not in PLANTUML_IMAGE_EXTENSIONS:
        raise RenderError(f"Unsupported PlantUML output format '{output_format}'")

    jar_path = _resolve_jar_path()
    if jar_path is not None:
        rendered = _render_via_jar(puml, jar_path, output_format)
        if rendered is not None:
            logger.debug("Rendered via local JAR (%d bytes)", len(rendered))
            return rendered
    else:
        logger.info("PlantUML JAR not found — using HTTP rendering")

    return _render_via_http(puml, output_format, server_url)
