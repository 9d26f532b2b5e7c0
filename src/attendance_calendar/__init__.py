"""Attendance Calendar package.

Monthly attendance calendars (one per year-month) broken into typed day
entries, with a thin Flask controller layer over service/repository layers.
"""
