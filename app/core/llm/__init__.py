"""LLM integration layer.

Kept deliberately thin:
- No prompt/output logging (review text may be sensitive).
- Configured via environment variables through `app.core.settings`.
- One request per call, no retries; callers decide how failures surface.
"""
