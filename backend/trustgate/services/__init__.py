"""Services Layer — trusted-apps operations over the exception-list client.

Invariants:
    - Services never build HTTP responses (routes translate outcomes)
    - The list client is injected, never constructed here
"""
