"""
Módulo do Mural (Blueprint)

Define o Blueprint do Flask para a navegação entre telas e a leitura dos
eventos, avisos e resultados sincronizados.
"""

from flask import Blueprint

board_bp = Blueprint('board_bp', __name__)

# Importa as rotas no final
from . import routes
