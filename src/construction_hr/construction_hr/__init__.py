"""Construction HR package.

Feature modules (users, employees, attendance, payroll, leaves, applications,
site_monitoring) each pair a thin Flask controller with service/repository
layers; notifications and mail are injected capabilities.
"""
