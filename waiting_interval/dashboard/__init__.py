"""Streamlit dashboard and its HTTP client."""
