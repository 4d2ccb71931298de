"""
Contacts feature module.

Recruiters and other people linked to job applications.
"""
