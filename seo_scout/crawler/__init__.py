"""seo_scout.crawler: HTTP fetching, sitemap resolution and the crawl data models."""
