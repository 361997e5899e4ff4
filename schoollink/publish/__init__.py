"""
Módulo de Publicação (Blueprint)

Gerencia as escritas do professor: novos eventos, avisos e notas.
"""

from flask import Blueprint

publish_bp = Blueprint(
    'publish_bp',
    __name__,
    url_prefix='/publish' # Todas as rotas começarão com /publish
)

from . import routes
