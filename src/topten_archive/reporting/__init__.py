"""Read side: rating aggregation and report rendering."""
