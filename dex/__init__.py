"""dex/ - Venue quoting layer."""
