from django.apps import AppConfig


class InfrastructureConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'completa.infrastructure'
    label = 'infrastructure' # Define um label para evitar conflitos de nomes

    def ready(self):
        from .instances import conectar_sinais
        conectar_sinais()
