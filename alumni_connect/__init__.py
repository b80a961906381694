"""
AlumniConnect
Campus alumni networking backend: mentorships between students and alumni,
per-mentorship messaging and placement statistics.

Architecture:
- MongoDB: every entity (users, content, mentorships, messages)
- FastAPI: REST API under /api, session cookie authentication
"""

__version__ = "1.0.0"
