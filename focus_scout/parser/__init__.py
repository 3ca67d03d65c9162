"""focus_scout.parser: HTML document model."""
