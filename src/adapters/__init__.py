"""Adaptadores: cliente HTTP, almacenamiento durable y exportadores.

Por qué:
- Los detalles de infraestructura (httpx, ficheros) quedan fuera del core.
"""
