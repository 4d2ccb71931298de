"""
Job applications feature module.
"""
