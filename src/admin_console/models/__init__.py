"""
Entity records, the state tree, the action vocabulary and results.
"""
