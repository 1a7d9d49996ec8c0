"""Core building blocks: record sources, projection, analysis and layout."""
