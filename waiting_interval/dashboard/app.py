"""Simple Streamlit dashboard to peek at running interval cycles.

The app polls each server's `/intervals` endpoint and renders one entry per
cycle, with a button to stop it, then reruns itself after the refresh
interval. Adjust servers and refresh interval above to watch delay
progressions grow.
"""

import time

import requests
import streamlit as st

from waiting_interval.dashboard.client import fetch_intervals, stop_interval

st.set_page_config(page_title="Waiting Intervals", layout="wide")
servers_text = st.text_input(
    "Servers (comma-separated name=url)",
    "local=http://localhost:8000",
)
servers = dict(kv.split("=", 1) for kv in servers_text.split(",") if "=" in kv)
interval = st.slider("Refresh interval (sec)", 0.2, 5.0, 1.0)

cols = st.columns(max(1, len(servers)))
for i, (name, url) in enumerate(sorted(servers.items())):
    with cols[i]:
        st.subheader(name)
        try:
            state = fetch_intervals(url)
        except requests.RequestException as e:
            st.error(str(e))
            continue
        st.caption(f"{state['active']} active cycles")
        for cycle in state["cycles"]:
            st.json(cycle, expanded=False)
            if st.button(f"Stop #{cycle['id']}", key=f"stop-{name}-{cycle['id']}"):
                stop_interval(url, cycle["id"])

time.sleep(interval)
st.rerun()
