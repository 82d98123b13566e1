"""
http-bench: fixed-count concurrent HTTP load generator.
"""

__version__ = "1.0.0"
