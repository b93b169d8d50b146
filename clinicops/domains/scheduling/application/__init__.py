"""
Scheduling Application Layer
"""
