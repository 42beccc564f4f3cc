"""Domain layer for Verdant.

Companion lookup and the gardening advisor. Framework-agnostic: nothing here
imports Flask or the database, so the rules are testable on plain objects.
"""
