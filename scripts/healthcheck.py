"""
scripts/healthcheck.py

Container probe: exit 0 only when GET /health answers {"status": "ok"}.
"""

from __future__ import annotations

import json
import os
import sys
from urllib.error import URLError
from urllib.request import urlopen


def probe(url: str, timeout_seconds: float = 2.0) -> bool:
    try:
        with urlopen(url, timeout=timeout_seconds) as response:
            payload = json.loads(response.read() or b"null")
    except (URLError, TimeoutError, ValueError):
        return False
    return isinstance(payload, dict) and payload.get("status") == "ok"


def main(argv: list[str]) -> int:
    default_url = f"http://127.0.0.1:{os.getenv('PORT', '8000')}{os.getenv('HEALTHCHECK_PATH', '/health')}"
    url = argv[1] if len(argv) > 1 else default_url
    return 0 if probe(url) else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
