"""
Persistence adapters.

Users live in one JSON file; the product catalog is a set of JSON tables
produced from the supplier CSV. Services go through these modules instead of
touching the files.
"""
