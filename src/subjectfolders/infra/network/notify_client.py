from __future__ import annotations

"""
Run Warning Broadcast Client.

Delivers the consolidated end-of-run warning to operators: an HTTP
webhook (JSON POST through requests) and, on Windows, the 'msg' console
broadcast.
"""

import logging
import os
import subprocess
from typing import Any, Dict, Tuple

import requests

from subjectfolders.domain.constants import APP_NAME, APP_VERSION

logger = logging.getLogger(__name__)

USER_AGENT = f"{APP_NAME}/{APP_VERSION}"
DEFAULT_TIMEOUT = 10

# 'msg' rejects messages longer than this
_MSG_MAX_CHARS = 255


def post_webhook(url: str, message: str, payload: Dict[str, Any]) -> Tuple[bool, str]:
    """Send the warning to a webhook endpoint."""
    data = dict(payload)
    data["text"] = message
    return _secure_post(url, data)


def broadcast_console(message: str) -> Tuple[bool, str]:
    """Broadcast a short notice to logged-on Windows sessions."""
    if os.name != "nt":
        return False, "Console broadcast is only available on Windows."
    text = message if len(message) <= _MSG_MAX_CHARS else message[:_MSG_MAX_CHARS - 3] + "..."
    try:
        subprocess.run(["msg", "*", text], check=True, capture_output=True, timeout=DEFAULT_TIMEOUT)
    except (OSError, subprocess.SubprocessError) as e:
        return False, str(e)
    return True, "Success"


def _secure_post(url: str, data: Dict[str, Any]) -> Tuple[bool, str]:
    """Execute a JSON POST request, reporting failures instead of raising."""
    headers = {"User-Agent": USER_AGENT}
    try:
        response = requests.post(url, json=data, headers=headers, timeout=DEFAULT_TIMEOUT)
    except requests.RequestException as e:
        logger.warning(f"Webhook delivery failed: {e}")
        return False, str(e)
    if response.status_code not in (200, 201, 202, 204):
        logger.warning(f"Webhook answered HTTP {response.status_code}")
        return False, f"HTTP {response.status_code}"
    return True, "Success"
