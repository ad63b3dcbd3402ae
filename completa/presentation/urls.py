"""
Define as rotas de API REST da loja, do painel administrativo e de autenticação.
"""
from django.urls import path

from . import views, views_admin, views_auth


urlpatterns = [
    # ====================================================================
    # 1. ROTAS DE CATÁLOGO (LOJA)
    # ====================================================================
    path('produtos/', views.ProdutoListaAPIView.as_view(), name='api_produtos'),
    path('produtos/<str:produto_id>/', views.ProdutoDetalheAPIView.as_view(), name='api_produto_detalhe'),
    path('vitrines/', views.VitrinesAPIView.as_view(), name='api_vitrines'),

    # ====================================================================
    # 2. ROTAS DE COMPRA (CARRINHO, FRETE E CHECKOUT)
    # ====================================================================
    path('carrinho/', views.CarrinhoAPIView.as_view(), name='api_carrinho'),
    path('lista-desejos/', views.ListaDesejosAPIView.as_view(), name='api_lista_desejos'),
    path('frete/', views.FreteAPIView.as_view(), name='api_frete'),
    path('cep/<str:cep>/', views.ConsultaCepAPIView.as_view(), name='api_cep'),
    path('checkout/', views.CheckoutAPIView.as_view(), name='api_checkout'),
    path('checkout/whatsapp/', views.CheckoutWhatsappAPIView.as_view(), name='api_checkout_whatsapp'),

    # ====================================================================
    # 3. ROTAS DE AUTENTICAÇÃO E PERFIL
    # ====================================================================
    path('auth/cadastro/', views_auth.CadastroUsuarioAPIView.as_view(), name='api_cadastro'),
    path('auth/sincronizar/', views_auth.SincronizarUsuarioAPIView.as_view(), name='api_sincronizar_usuario'),

    # ====================================================================
    # 4. ROTAS ADMINISTRATIVAS
    # ====================================================================
    path('admin/painel/', views_admin.PainelAdminAPIView.as_view(), name='api_admin_painel'),

    # Gerenciamento de Produtos (Admin)
    path('admin/produtos/', views_admin.ProdutosAdminAPIView.as_view(), name='api_admin_produtos'),
    path('admin/produtos/<str:produto_id>/', views_admin.ProdutoAdminAPIView.as_view(), name='api_admin_produto'),
    path(
        'admin/produtos/<str:produto_id>/alternar/<str:campo>/',
        views_admin.AlternarFlagProdutoAPIView.as_view(),
        name='api_admin_produto_alternar',
    ),
    path('admin/imagens/', views_admin.ImagemProdutoAPIView.as_view(), name='api_admin_imagens'),

    # Gerenciamento de Pedidos (Admin)
    path('admin/pedidos/', views_admin.PedidosAdminAPIView.as_view(), name='api_admin_pedidos'),
    path('admin/pedidos/<str:pedido_id>/', views_admin.PedidoAdminAPIView.as_view(), name='api_admin_pedido'),
    path(
        'admin/pedidos/<str:pedido_id>/status/',
        views_admin.AtualizarStatusPedidoAPIView.as_view(),
        name='api_admin_pedido_status',
    ),
    path(
        'admin/pedidos/<str:pedido_id>/link-pagamento/',
        views_admin.LinkPagamentoPedidoAPIView.as_view(),
        name='api_admin_pedido_link',
    ),
]
