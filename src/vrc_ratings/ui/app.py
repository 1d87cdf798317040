"""Streamlit web application for VRC team ratings."""

import sys
from pathlib import Path

# Add src to path for imports when running directly
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

import streamlit as st

from vrc_ratings.ui.components import (
    render_leaderboard,
    render_prediction,
    render_rating_history,
    render_statistics,
    render_team_selector,
)
from vrc_ratings.ui.state import get_rating_run, load_teams_list


def main():
    """Main Streamlit application."""
    st.set_page_config(
        page_title="VRC Team Ratings",
        page_icon="🤖",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    st.title("🤖 VRC Team Ratings")

    run = get_rating_run()
    if run is None:
        st.warning(
            "No match data found. Please fetch matches first:\n\n"
            "```bash\nvrc-fetch events\nvrc-fetch matches\n```"
        )
        return

    teams = load_teams_list(run)

    with st.sidebar:
        st.header("Data")
        render_statistics(run.statistics)
        if run.skipped_matches:
            st.caption(f"{run.skipped_matches} matches with a missing team were not rated.")

        st.divider()
        st.header("About")
        st.markdown(
            """
            Ratings estimate how many points a team adds to its alliance.
            After every match both teams on an alliance move by the same
            amount: 0.288 times the difference between the actual and the
            predicted score margin.
            """
        )

    leaderboard_tab, history_tab, matchup_tab = st.tabs(["Leaderboard", "Team history", "Matchup"])

    with leaderboard_tab:
        limit = st.slider("Teams", min_value=10, max_value=200, value=50, step=10)
        render_leaderboard(run, limit=limit)

    with history_tab:
        team = render_team_selector(teams, key="history_team", label="Team")
        if team:
            render_rating_history(run, team)

    with matchup_tab:
        col1, col2 = st.columns(2)
        with col1:
            red_1 = render_team_selector(teams, key="red_1", label="Red 1")
            red_2 = render_team_selector(teams, key="red_2", label="Red 2")
        with col2:
            blue_1 = render_team_selector(teams, key="blue_1", label="Blue 1")
            blue_2 = render_team_selector(teams, key="blue_2", label="Blue 2")

        selected = [red_1, red_2, blue_1, blue_2]
        if not all(selected):
            st.info("Select four teams to predict a match.")
        elif len(set(selected)) < 4:
            st.error("Please select four different teams.")
        else:
            st.divider()
            render_prediction(run.predict((red_1, red_2), (blue_1, blue_2)))


if __name__ == "__main__":
    main()
