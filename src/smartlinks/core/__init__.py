"""Page rewriting entry points."""

from .rewriter import LinkRewriter, RewriteReport, SmartLinkRewriter, rewrite_blocking

__all__ = ["LinkRewriter", "RewriteReport", "SmartLinkRewriter", "rewrite_blocking"]
