"""catalogsync - catalog synchronization core for an apparel storefront.

Turns shopper filters into paginated catalog queries, fills bulk views in
the background without duplicate rows, degrades gracefully when the
catalog times out, and layers confirmed favorite and cart actions over
the fetched items.
"""

__version__ = "0.1.0"
