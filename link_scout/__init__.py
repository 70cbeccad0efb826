"""
LinkScout package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.2.0"

# Expose CLI entry point; the submodule name ``link_scout.cli`` stays the module
from link_scout.cli import cli as main_cli  # noqa: E402
from link_scout.crawler.crawler import LinkCrawler, crawl  # noqa: E402

__all__ = ["__version__", "main_cli", "crawl", "LinkCrawler"]
