"""
Campus Job Board
A college job board where students and alumni post jobs and track applications.

Architecture:
- FastAPI: REST API under /api
- MongoDB: users, jobs, applications (unique (job, user) index)
"""

__version__ = "1.0.0"
