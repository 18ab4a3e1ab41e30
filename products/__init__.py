"""
Products module - software products sold as one-time or subscription licenses.
"""
