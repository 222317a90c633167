"""Dayflow HRMS package.

Feature modules (users, attendance, leaves, workflow) sit on top of a JSON
record store; a thin Flask controller layer exposes them over HTTP.
"""
