"""Top-level package for movie_catalog."""
import logging

__version__ = "0.1.0"

# Good practice: https://docs.python-guide.org/writing/logging/#logging-in-a-library
logging.getLogger(__name__).addHandler(logging.NullHandler())
