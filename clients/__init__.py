"""
Clients module - companies and people that hold licenses.
"""
