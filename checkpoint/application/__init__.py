"""
===============================================================================
APPLICATION LAYER (Public API / Exports)
===============================================================================

Expone los puntos de entrada estables de la capa de aplicación.

Nota:
  - Los casos de uso se importan desde `usecases/` subdirectories.
  - No hay servicios de aplicación compartidos fuera de los casos de uso.
===============================================================================
"""
