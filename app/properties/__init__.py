"""
Properties app for marketplace listings.

Listings are owned by a realtor and are the subject of every chat thread:
a customer starts a thread from a listing, and thread lists show the
listing's title and location.

Usage:
    from properties.models import Property, PropertyStatus
    from properties.services import PropertyService
"""
