"""link_scout.parser: document parsers (sitemap XML, HTML links)."""
