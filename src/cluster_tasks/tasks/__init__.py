"""
Task subsystem.

Components:
- task_models.py: data structures (TaskStatus, TaskPoll, results)
- waiter.py: submit an admin mutation and poll its task to completion
- operations.py: backup/restore built on the waiter
"""
