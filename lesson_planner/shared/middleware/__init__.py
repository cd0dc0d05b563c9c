"""Server middleware chained around every request."""
