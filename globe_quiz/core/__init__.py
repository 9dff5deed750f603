"""Quiz session engine for the globe geography quiz."""
