"""Network-backed fetch functions."""

from strata.clients.http import HttpFeedClient, feed_params

__all__ = ["HttpFeedClient", "feed_params"]
