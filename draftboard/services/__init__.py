"""Core services: image lifecycle coordination and post views."""

from draftboard.services.lifecycle import ImageLifecycleCoordinator
from draftboard.services.post_view import PostViewService

__all__ = ["ImageLifecycleCoordinator", "PostViewService"]
