"""Publishing generated Markdown to the xTiles document service."""

from planboard.publisher.client import DocumentPublisher
from planboard.publisher.models import DocumentPublishResult, PublishError

__all__ = ["DocumentPublishResult", "DocumentPublisher", "PublishError"]
