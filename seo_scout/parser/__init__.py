"""seo_scout.parser: HTML and sitemap XML parsing."""
