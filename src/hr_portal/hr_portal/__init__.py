"""HR Portal package.

Feature modules (employees, departments, leaves, attendance, polls, ...) each
expose a thin Flask controller over service and repository layers.
"""
