"""
Accounts module - users, profiles and session authentication.

This module handles:
- Profile entity (role and display name attached to a Django user)
- Session login/logout
- Role checks (admin can write, staff can only read)
"""
