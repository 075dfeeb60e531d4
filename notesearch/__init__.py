"""notesearch: multi-strategy search and ranking over in-memory notes."""

__version__ = "0.1.0"
