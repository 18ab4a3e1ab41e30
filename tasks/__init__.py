"""
Tasks module - follow-ups assigned to users, optionally tied to a contact or deal.
"""
