"""Song Data Analyzer: scrape musical attributes for a track from tunebat."""

__version__ = "0.1.0"
