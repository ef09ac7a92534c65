"""HTTP routes for mood entries and weather lookups."""
