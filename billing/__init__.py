"""
Billing module - Stripe checkout for licenses and payment webhook reconciliation.
"""
