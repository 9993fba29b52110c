"""Payroll Engine package.

This package is organized by feature modules (employees, schedules, attendance,
payroll, payslips, ...) with pure rule evaluators, a thin Flask controller layer
and service/repository layers.
"""
