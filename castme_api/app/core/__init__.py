"""
Core infrastructure: settings, logging, errors, argument validation
and the document store.
"""
