"""Portfolio CMS backend: projects, media, engagement and site content."""
