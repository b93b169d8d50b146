"""
Treatments Application Layer

Continuity guard over patient treatments and its ports.
"""
