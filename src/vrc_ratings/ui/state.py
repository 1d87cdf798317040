"""State management and caching for the Streamlit app."""

from typing import Optional

import streamlit as st

from vrc_ratings.ratings.system import RatingRun, RatingSystem
from vrc_ratings.scraper import DataStorage


@st.cache_resource
def get_storage() -> DataStorage:
    """Get or create the DataStorage instance."""
    return DataStorage()


@st.cache_resource(ttl=300)
def get_rating_run() -> Optional[RatingRun]:
    """
    Rate the stored match set in memory.

    Returns:
        RatingRun, or None if no matches are stored
    """
    matches = get_storage().load_completed_matches()
    if not matches:
        return None
    return RatingSystem().run(matches)


def load_teams_list(run: RatingRun) -> list[str]:
    """Rated team names sorted alphabetically."""
    return sorted(run.ratings.keys(), key=str.lower)
