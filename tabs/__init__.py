"""
Page modules for the SOC Report Admin Console.
"""
from . import collection_page

__all__ = [
    'collection_page',
]
