"""Core HR module — Employee and Department models plus employee lookups."""

from hrms.core_hr.models import Department, Employee

__all__ = ["Employee", "Department"]
