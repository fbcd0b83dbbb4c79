"""Storefront administration backend.

Manages homepage copy, the product catalog, the category tree and the
search tree taxonomy behind a JSON HTTP API.
"""

__version__ = "0.1.0"
