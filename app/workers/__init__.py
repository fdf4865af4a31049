"""
Workers module for background jobs.

This module contains:
- reminder_cli: ``plantcare-reminders`` console script (overdue sweep and
  due-soon notifications)
"""
