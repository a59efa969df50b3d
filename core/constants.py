"""
Core — Shared Constants

@file core/constants.py
"""

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

AUDIT_ACTION_CREATE = 'CREATE'
AUDIT_ACTION_UPDATE = 'UPDATE'
AUDIT_ACTION_DELETE = 'DELETE'
AUDIT_ACTION_STATUS_CHANGE = 'STATUS_CHANGE'
AUDIT_ACTION_DISTRIBUTE = 'DISTRIBUTE'
AUDIT_ACTION_ADJUST = 'ADJUST'
