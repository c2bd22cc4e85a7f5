"""Routing: ordered route table with first-match dispatch.

Routes are registered at startup and matched in registration order.
A route's prefix can move later; its matcher is recompiled with it.
"""
