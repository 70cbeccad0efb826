"""link_scout.crawler: discovery, dedup and page checking components."""
