"""
Use Cases

Organized into domain folders:
- maintenance/: Maintenance request lifecycle

Import from subdirectories for better organization.
"""
