"""Routing — nested, first-match-wins matching over a path cursor.

No route table: conditions are evaluated in program order while a
handler body runs, consuming the request path as they succeed.
"""
