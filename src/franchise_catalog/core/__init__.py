"""
Core infrastructure for the Franchise Catalog: configuration, logging and errors.
"""
