"""
Utilities Package

Small helpers used across the application:
- masking: Hide personal data (emails) in admin responses
"""
