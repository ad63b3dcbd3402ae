# completa/core/apps.py

from django.apps import AppConfig

class CoreConfig(AppConfig):
    # O nome completo do path da aplicação
    name = 'completa.core'
    label = 'core'
    verbose_name = 'Regras de Negócio (Core)'

    # Sem modelos: a persistência fica na Infrastructure, Catalog e Vendas.
    default_auto_field = 'django.db.models.BigAutoField'
