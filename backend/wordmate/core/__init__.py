# wordmate/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Application initialization and subscription plan seeding
- db: Database configuration and connection management
- security: Authentication, password hashing, and admin key checks
- timeutil: Timezone-aware clock helpers
"""
