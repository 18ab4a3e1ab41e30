"""
Contacts module - CRM contacts, their tags and interaction history.
"""
