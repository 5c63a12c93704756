"""Verse queries, excerpt rendering, fetching and previews."""
