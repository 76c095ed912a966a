"""Core HR module - Employee, Department, Address models, schemas and services."""

from orgchart.core_hr.models import Address, Department, Employee

__all__ = ["Address", "Employee", "Department"]
