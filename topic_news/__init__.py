"""Topic news aggregation and cited briefing synthesis service."""
