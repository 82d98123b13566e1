"""
Run counters, reports and their optional exports.
"""
