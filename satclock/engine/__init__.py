"""
Clock engine: the time authority and the machinery around it.
"""
