"""
News Verification API Service.

A crowd-moderated platform for checking news items. Members submit news,
the community votes "fake" / "not fake", and comments carry the discussion
and the evidence behind each vote.

The service allows users to:
- Register and sign in with a bearer token
- Submit news items (members and admins)
- Vote once per news item and comment on it
- Moderate: classify news, hide/restore news, hide comments, manage roles
"""

__version__ = "0.1.0"
