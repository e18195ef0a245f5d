"""Reports — console summaries and the unified Code Quality feed."""
