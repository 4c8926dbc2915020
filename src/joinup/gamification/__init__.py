"""Points, levels, streaks and badges."""
