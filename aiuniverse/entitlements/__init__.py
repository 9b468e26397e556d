"""
Subscription entitlements.

Responsibilities:
- Map each subscription tier to its feature policy and numeric limits.
- Decide whether a user may add another favorite.
- Provide feature checks used for page-level gating.
"""
