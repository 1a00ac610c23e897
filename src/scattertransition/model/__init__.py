"""
The MODEL layer contains pure data structures.
It has NO knowledge of the transition strategies or of rendering.
It deals with Dimensions, Views and the parameter schema.
"""
