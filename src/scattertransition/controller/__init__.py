"""
The CONTROLLER layer runs work off the caller's thread.
"""
