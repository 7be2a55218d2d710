"""Codecs: build/parse pairs for each part of a navigational address.

Path, query, hash and state codecs are independent. Each is declared
once at route-definition time and is immutable afterwards.
"""
