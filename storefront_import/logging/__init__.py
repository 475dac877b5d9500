"""Console logging setup and the JSON Lines import error log."""
