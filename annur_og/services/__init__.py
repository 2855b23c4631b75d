"""Template, browser and rendering services."""
