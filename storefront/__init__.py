"""
Storefront API - catalog, cart and checkout service
"""
