"""Routing — pattern compiler, route table, and the two-way path link.

Routes are compiled once into an immutable table; parsing and
stringifying are pure functions of the table, and ``PathLink`` wraps them
in change subscriptions.
"""
