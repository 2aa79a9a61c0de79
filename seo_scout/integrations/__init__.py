"""seo_scout.integrations: project environment files and git."""
