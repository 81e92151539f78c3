"""Attendance Analytics package.

Organized by feature modules (attendance, formulas, metrics, recalculation)
with a thin Flask controller layer over service/repository layers.
"""
