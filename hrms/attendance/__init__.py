"""Attendance module — records, holidays, classification and the working calendar."""
