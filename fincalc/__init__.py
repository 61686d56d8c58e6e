"""
Personal-finance calculators: property analysis, leveraged-asset planning
and multi-debt payoff.
"""

__version__ = "0.1.0"
