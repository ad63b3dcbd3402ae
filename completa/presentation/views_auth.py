# completa/presentation/views_auth.py
"""
Views para cadastro e perfil de usuários.
O login é feito pelos endpoints de token JWT.
"""
from django.contrib.auth import get_user_model
from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from completa.core import dependency_injection as di
from .serializers import SincronizarUsuarioSerializer, UsuarioSerializer


class CadastroSerializer(serializers.Serializer):
    nome = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    senha = serializers.CharField(min_length=8, write_only=True)

    def validate_email(self, value):
        if get_user_model().objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Este e-mail já está cadastrado.")
        return value.lower()


class CadastroUsuarioAPIView(APIView):
    """
    Cria a conta (e-mail/senha). O papel é sempre 'user';
    o papel 'admin' só é atribuído pelo Admin do Django.
    """

    def post(self, request):
        serializer = CadastroSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dados = serializer.validated_data

        usuario = get_user_model().objects.create_user(
            email=dados['email'], password=dados['senha'], first_name=dados['nome']
        )
        perfil = di.get_sincronizar_usuario_use_case().executar(str(usuario.pk), dados['nome'], usuario.email)
        return Response(UsuarioSerializer(perfil).data, status=status.HTTP_201_CREATED)


class SincronizarUsuarioAPIView(APIView):
    """Devolve o perfil do usuário autenticado, criando-o no primeiro acesso."""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = SincronizarUsuarioSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        usuario = request.user
        perfil = di.get_sincronizar_usuario_use_case().executar(
            usuario_id=str(usuario.pk),
            nome=serializer.validated_data.get('nome') or usuario.get_full_name(),
            email=usuario.email,
            foto_url=serializer.validated_data.get('foto_url'),
        )
        return Response(UsuarioSerializer(perfil).data)
