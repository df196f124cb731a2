"""
Person Domain

Handles competency definitions and position competency requirements.
"""
