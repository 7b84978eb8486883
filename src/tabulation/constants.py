"""
Shared constants for election tabulation.
"""

# Registered method names
IRV = "irv"
BORDA = "borda"

# STV ballots whose weight falls to or below this are discarded
WEIGHT_EPSILON = 0.001

# Weighted tallies are rounded to this many decimal places for reporting only
TALLY_DECIMALS = 2
