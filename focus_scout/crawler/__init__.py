"""focus_scout.crawler: scheduler, frontier, scoring and robots policy."""
