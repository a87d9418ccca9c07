# apps/core/__init__.py

"""
Core - Aplicação principal do Chestnut Board

Contém:
- Models (Board, Column, Card, Worker) com exclusão lógica
- Hierarquia de erros do núcleo de cards
- Formulários de validação das requisições
- Comandos de seed e limpeza de workers órfãos
"""
