"""
Work Structures Domain

Positions that competency sets are applied to.
"""
