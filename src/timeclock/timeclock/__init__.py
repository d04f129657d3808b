"""Time Clock package.

Feature modules (time_entries, payroll) sit on a pure soft-cap engine
with thin Flask controller and MySQL repository layers around it.
"""
