"""
Viewings app: customers book visits to a listing, its realtor answers them.
"""
