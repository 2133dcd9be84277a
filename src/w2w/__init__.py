"""
w2w - Work Shift Scheduler

A desktop application for keeping a roster of agents and teams, generating
weekly shift schedules from days off, shift availability and dated notes,
and exporting them to Excel.
"""

__version__ = "1.0.0"
__author__ = "w2w Team"
