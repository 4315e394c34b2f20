"""
The APP layer: PySide6 adapters for the model's collaborators (surface,
frame host, pointer, settings store, wallpaper mode) and the control UI.
"""
