"""HTTP fetching and HTML parsing helpers."""
