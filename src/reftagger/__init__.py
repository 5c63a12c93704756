"""reftagger - locate, tag and preview Quran and Bible citations."""

__version__ = "0.1.0"
