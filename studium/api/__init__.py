"""
API module exposing the record keeper over HTTP.
"""

from .rest_api import StudiumRestAPI

__all__ = [
    "StudiumRestAPI",
]
