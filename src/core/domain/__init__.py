"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras puras: DTMI, direccionamiento, documentos y modos.
- El dominio no conoce HTTP, CLI, ni disco: solo conceptos del problema.
"""
