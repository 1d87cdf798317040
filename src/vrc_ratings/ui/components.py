"""UI components for the Streamlit app."""

from datetime import datetime, timezone
from typing import Optional

import plotly.graph_objects as go
import streamlit as st

from vrc_ratings.ratings.models import BaselineStatistics, MatchPrediction
from vrc_ratings.ratings.system import RatingRun


def render_team_selector(
    teams: list[str],
    key: str,
    label: str,
) -> Optional[str]:
    """
    Render a team selection dropdown.

    Args:
        teams: Team names
        key: Unique key for the widget
        label: Label to display

    Returns:
        Selected team name or None
    """
    selected = st.selectbox(
        label,
        options=[""] + teams,
        key=key,
        help="Search by typing the team number",
    )
    return selected or None


def render_statistics(stats: BaselineStatistics):
    """Render the baseline statistics in the sidebar."""
    st.metric("Matches", f"{stats.match_count:,}")
    st.metric("Mean team score", f"{stats.mean:.2f}")
    st.metric("Margin std. dev.", f"{stats.standard_deviation:.2f}")
    st.metric("Baseline rating", f"{stats.baseline_rating:.2f}")


def render_leaderboard(run: RatingRun, limit: int = 50):
    """Render the top rated teams as a table."""
    rows = [
        {"Rank": i, "Team": team, "Rating": round(rating, 3)}
        for i, (team, rating) in enumerate(run.top_teams(limit), start=1)
    ]
    st.dataframe(rows, hide_index=True, use_container_width=True)


def render_rating_history(run: RatingRun, team: str):
    """Render a team's rating after each of its matches."""
    history = run.team_history(team)
    if not history:
        st.info(f"{team} has no rated matches.")
        return

    times = [datetime.fromtimestamp(u.started_timestamp, tz=timezone.utc) for u in history]
    ratings = [u.new_rating for u in history]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=times,
        y=ratings,
        mode="lines+markers",
        name=team,
        customdata=[[u.match_id, u.delta] for u in history],
        hovertemplate="Match %{customdata[0]}<br>Rating %{y:.2f}<br>Change %{customdata[1]:+.2f}",
    ))
    fig.add_hline(
        y=run.statistics.baseline_rating,
        line_dash="dash",
        line_color="gray",
        annotation_text="baseline",
    )
    fig.update_layout(
        xaxis_title="Match start",
        yaxis_title="Rating",
        height=400,
        margin=dict(l=40, r=40, t=20, b=40),
    )
    st.plotly_chart(fig, use_container_width=True)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Current rating", f"{run.ratings[team]:.2f}")
    with col2:
        st.metric("Rated matches", len(history))
    with col3:
        st.metric("Peak rating", f"{max(ratings):.2f}")


def render_prediction(prediction: MatchPrediction):
    """Render a predicted match result."""
    col1, col2 = st.columns(2)

    with col1:
        st.markdown(f"**:red[Red: {' / '.join(prediction.red)}]**")
        st.metric("Predicted score", prediction.red_predicted_score)
        st.caption(f"Alliance rating {prediction.red_rating:.2f}")

    with col2:
        st.markdown(f"**:blue[Blue: {' / '.join(prediction.blue)}]**")
        st.metric("Predicted score", prediction.blue_predicted_score)
        st.caption(f"Alliance rating {prediction.blue_rating:.2f}")

    if prediction.favored == "even":
        st.info("Even match")
    else:
        st.success(
            f"{prediction.favored.capitalize()} favored by {abs(prediction.predicted_margin):.1f} points"
        )

    if prediction.unknown_teams:
        st.warning(f"No rating for {', '.join(prediction.unknown_teams)}; baseline used.")
