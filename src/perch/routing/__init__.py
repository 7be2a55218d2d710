"""Routing: path, query, hash and state codecs bound into one route.

Routes are declared once at module scope and are immutable; building and
parsing are pure delegations to the bound codecs.
"""
