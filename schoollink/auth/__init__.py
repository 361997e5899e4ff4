"""
Módulo de Autenticação (Blueprint)

Define o Blueprint do Flask para a escolha de papel, o login com as contas
ilustrativas e o logout.
"""

from flask import Blueprint

# Cria uma instância do Blueprint para 'auth'
auth_bp = Blueprint('auth_bp', __name__)

# Importa as rotas no final para evitar dependência circular
from . import routes
