"""
The MODEL layer contains pure data structures and the curve/timing logic.
It has NO knowledge of the GUI (Qt). Surfaces, frame hosts and pointer
sources are injected through the Protocols in `compositor` and `clock`.
"""
