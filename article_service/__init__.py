"""Article service: a CRUD HTTP/JSON backend for articles made of ordered paragraphs."""

__version__ = "1.0.0"
