"""
Dashboard module - license counters and the sales chart.
"""
