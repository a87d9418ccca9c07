# apps/board/__init__.py

"""
Board - Núcleo de mutação de cards

Funcionalidades:
- Movimentação de cards sob lock global (Redis ou em processo)
- Reconciliação de workers (add/remove com validação)
- API JSON para cards
"""
