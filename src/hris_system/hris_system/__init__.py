"""HRIS time & payroll package.

Feature modules (attendance, employees, holidays, settings, payroll) each carry
their own model/repository/service layers, with a thin Flask controller on top.
"""
