"""
Pydantic schema definitions for API payloads and stored documents.

Each domain (users, projects) defines its own Pydantic models for
request and response bodies.  Profile records embedded in user
documents are frozen models.
"""
