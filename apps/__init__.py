# apps/__init__.py

"""
Chestnut Board - Aplicações Django

Este pacote contém as aplicações do sistema:
- core: Models principais, erros, formulários e comandos
- board: Serviço de cards (workers, movimentação com lock) e API JSON
"""

__version__ = '0.1.0'
