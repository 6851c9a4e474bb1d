"""
TalentosPlus
Employee records for HR: CRUD, bulk import/export, CVs and an AI dashboard.

Architecture:
- PostgreSQL: employees plus department / position / education level tables
- SMTP: welcome emails
- AI assistant: answers dashboard questions from current data (not a database!)
"""

__version__ = "1.0.0"
