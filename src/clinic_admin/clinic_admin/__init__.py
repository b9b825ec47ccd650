"""Clinic Admin package.

This package is organized by feature modules (archive, patients, employees, ...)
with a thin Flask controller layer and service/repository layers underneath.
"""
