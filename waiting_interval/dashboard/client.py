"""Tiny HTTP client for the control API, used by the Streamlit dashboard."""

from typing import Any, Dict

import requests


def fetch_intervals(base_url: str, timeout: float = 0.3, session: Any = requests) -> Dict[str, Any]:
    """Return the `/intervals` payload of the server at `base_url`."""
    r = session.get(base_url.rstrip("/") + "/intervals", timeout=timeout)
    r.raise_for_status()
    return r.json()


def stop_interval(base_url: str, cycle_id: int, timeout: float = 0.3, session: Any = requests) -> bool:
    """Ask the server to stop `cycle_id`; False if it was not active."""
    r = session.delete(f"{base_url.rstrip('/')}/intervals/{cycle_id}", timeout=timeout)
    if r.status_code == 404:
        return False
    r.raise_for_status()
    return True
