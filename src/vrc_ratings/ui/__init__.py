"""Streamlit web UI."""

from .state import get_rating_run, get_storage, load_teams_list

__all__ = [
    "get_storage",
    "get_rating_run",
    "load_teams_list",
]
