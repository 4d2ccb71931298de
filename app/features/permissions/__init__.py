"""
Permission and role management feature module.

Implements role-based access control: each user holds one role, each role
holds a set of named permissions, and routes are gated on a single
permission name.
"""
