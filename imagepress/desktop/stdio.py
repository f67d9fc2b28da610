"""
Line-delimited JSON channel between the desktop shell and this process.

Each request line is {"id": ..., "channel": ..., "payload": {...}} and each
reply line is {"id": ..., "result": {...}}. Requests are handled one at a
time in arrival order. Logs go to stderr; stdout carries only replies.
"""
import json
import logging
import os
import sys
from typing import Any, Dict, Optional, TextIO

from imagepress.desktop.handler import DesktopHandler

# Set up logging
logger = logging.getLogger(__name__)


def handle_line(handler: DesktopHandler, line: str) -> Dict[str, Any]:
    """Process one request line and build the reply message."""
    try:
        message = json.loads(line)
    except json.JSONDecodeError as e:
        logger.warning(f"Malformed request line: {e}")
        return {"id": None, "result": {"error": "Malformed request"}}

    if not isinstance(message, dict):
        return {"id": None, "result": {"error": "Malformed request"}}

    request_id = message.get("id")
    payload = message.get("payload")
    channel = message.get("channel")
    if not isinstance(channel, str):
        return {"id": request_id, "result": {"error": "Malformed request"}}
    if payload is not None and not isinstance(payload, dict):
        return {"id": request_id, "result": {"error": "Malformed request"}}

    return {"id": request_id, "result": handler.handle(channel, payload)}


def serve_stdio(
    handler: Optional[DesktopHandler] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None
) -> int:
    """
    Serve requests until stdin closes.

    Returns:
        Number of requests handled
    """
    handler = handler or DesktopHandler()
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    handled = 0
    logger.info(f"Desktop process ready, channels: {', '.join(handler.channels)}")
    for line in stdin:
        if not line.strip():
            continue
        reply = handle_line(handler, line)
        stdout.write(json.dumps(reply) + "\n")
        stdout.flush()
        handled += 1

    logger.info(f"Input closed after {handled} requests")
    return handled


def main() -> None:
    """Console entry point for the desktop embedded process."""
    logging.basicConfig(
        level=getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )
    serve_stdio()


if __name__ == "__main__":
    main()
