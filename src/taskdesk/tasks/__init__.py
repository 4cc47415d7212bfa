"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskStatus) and the pure
  ordering / status-derivation rules
- task_store.py: in-memory collection with query and mutation helpers
"""
