"""
Módulo de Configuração (Blindado)

Define a classe de configuração principal. Implementa o padrão 'Fail Fast':
se uma variável crítica estiver faltando, a aplicação nem inicia.

A configuração do Firebase só é interpretada na criação da aplicação; se
estiver malformada, o SchoolLink sobe e mostra a tela de erro de
inicialização em vez de quebrar no import.
"""

import os
from dotenv import load_dotenv

# Carrega variáveis do arquivo .env
load_dotenv()


class Config:
    """
    Classe de configuração base da aplicação.
    """

    # === SEGURANÇA CRÍTICA (Fail Fast) ===
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        raise ValueError("ERRO CRÍTICO: 'SECRET_KEY' não encontrada no .env. A aplicação não pode iniciar insegura.")

    # === FIREBASE ===
    # JSON com apiKey, projectId, ... (o mesmo objeto do SDK web)
    FIREBASE_CONFIG = os.environ.get('FIREBASE_CONFIG', '')
    # Token customizado pré-emitido; sem ele o login do processo é anônimo
    INITIAL_AUTH_TOKEN = os.environ.get('INITIAL_AUTH_TOKEN') or None

    # Escopo compartilhado das coleções: artifacts/<app_id>/public/data/...
    SCHOOLLINK_APP_ID = os.environ.get('SCHOOLLINK_APP_ID', 'schoollink-app')

    if not FIREBASE_CONFIG:
        print("AVISO: 'FIREBASE_CONFIG' não configurado. A aplicação abrirá na tela de erro.")

    # === ESCRITAS (RetryPolicy) ===
    RETRY_MAX_ATTEMPTS = int(os.environ.get('RETRY_MAX_ATTEMPTS', '3'))
    RETRY_BASE_DELAY = float(os.environ.get('RETRY_BASE_DELAY', '1.0'))

    # === LOGIN ===
    LOGIN_RATE_LIMIT = os.environ.get('LOGIN_RATE_LIMIT', '10 per minute')

    # === FLASK ===
    DEBUG = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1')
