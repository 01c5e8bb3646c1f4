"""
Data models for CineShelf: movies, reviews and query parameters.
"""
