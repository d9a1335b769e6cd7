# Mendix Model API Backend
"""
Mendix Model API Backend

This package exposes a small HTTP API over Mendix app models. Each request
opens a temporary working copy through the model service, reads or changes
domain models and microflows, and returns JSON projections.

Architecture:
- Platform Client: authenticated access to the model service
- Working Copy: per-request checkout lifecycle
- Inspector Service: enumeration, module filtering, response shaping
- Module Resolver: best-effort module lookup for model elements
"""

__version__ = "1.0.0"
