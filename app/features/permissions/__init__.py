"""
Security groups, permission assignments and the permission catalog.

Groups form a hierarchy; permission codes are granted (or denied) to groups or
directly to users, and a user inherits the codes of every ancestor of their groups.
"""
