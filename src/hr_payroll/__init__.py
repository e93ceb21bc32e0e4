"""HR payroll package.

Organized by feature modules (employees, leaves, attendance, payroll, ...)
with a thin Flask controller layer over service/repository layers.
"""
