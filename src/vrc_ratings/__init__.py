"""VRC alliance Elo ratings."""
