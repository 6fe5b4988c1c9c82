"""Messaging app initialization.

Every event gets one group conversation; confirmed buyers are enrolled
into it.
"""
