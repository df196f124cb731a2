"""
Competency Sets Domain

Reusable, named bundles of competency requirements that are applied to
positions, tracked per position, diffed against the position's live
requirements and re-synchronised on request.
"""
