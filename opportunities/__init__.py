"""
Opportunities module - sales pipelines and the deals moving through them.
"""
