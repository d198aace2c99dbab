"""
Admin API access.

Components:
- models.py: request/response envelope (AdminRequest, AdminResponse, GraphQLError)
- transport.py: httpx-backed byte transport to /admin and /health
- client.py: AdminClient, the cluster capability used by the waiter
"""
