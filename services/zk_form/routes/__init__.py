"""
zk-form Service Routes
======================

API route handlers for the zk-form service.
"""

from services.zk_form.routes import verify


__all__ = ["verify"]
