"""Draftboard: private post drafts with signed image storage."""

__version__ = "0.1.0"
