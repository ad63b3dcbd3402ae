# Define os modelos do banco de dados para a camada de infraestrutura (autenticação e perfil).

from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager

# ====================================================================
# GERENCIADOR DE USUÁRIOS PERSONALIZADO (Para usar email como login)
# ====================================================================

class UsuarioManager(BaseUserManager):
    """
    Gerenciador de modelos de usuário onde o email é o identificador único
    para autenticação, em vez dos nomes de usuário.
    """
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('O e-mail deve ser definido')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('papel', Usuario.PAPEL_ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


# ====================================================================
# MODELO DE USUÁRIO
# ====================================================================

class Usuario(AbstractUser):
    """
    Usuário autenticado por e-mail. O papel 'admin' libera o painel administrativo
    e só é atribuído por um operador (Django Admin ou createsuperuser).
    """
    PAPEL_USER = 'user'
    PAPEL_ADMIN = 'admin'
    PAPEL_CHOICES = [
        (PAPEL_USER, 'Cliente'),
        (PAPEL_ADMIN, 'Administrador'),
    ]

    username = None
    email = models.EmailField('Endereço de E-mail', unique=True)

    papel = models.CharField(max_length=10, choices=PAPEL_CHOICES, default=PAPEL_USER)
    foto_url = models.URLField(max_length=500, blank=True, null=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UsuarioManager()

    class Meta:
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        db_table = 'infra_usuario'

    def __str__(self):
        return self.email

    @property
    def eh_admin(self) -> bool:
        return self.is_staff or self.papel == self.PAPEL_ADMIN
