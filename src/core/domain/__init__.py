"""Modelos y errores de dominio.

Por qué:
- Aquí viven estructuras de datos puras y estrictas (Pydantic v2).
- El dominio no conoce HTTP, la CLI ni el almacenamiento: solo conceptos del catálogo.
"""
