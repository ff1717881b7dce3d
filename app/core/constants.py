"""Application constants."""

# Chart series
MAX_SETS = 6  # Ranked sets drawn per workout in the SETS view

# Import / export
EXPORT_FILENAME = "replog-data.json"
EXPORT_INDENT = 2
