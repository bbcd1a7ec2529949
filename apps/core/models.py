# apps/core/models.py

from decimal import Decimal
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator


class Usuario(AbstractUser):
    """
    Modelo de usuário customizado da imobiliária

    O tipo define o que o usuário pode gerenciar: admin, diretor e
    gerente administram metas e quadros; corretor só move as próprias
    tarefas.
    """

    TIPO_CHOICES = [
        ('admin', 'Administrador'),
        ('diretor', 'Diretor'),
        ('gerente', 'Gerente'),
        ('corretor', 'Corretor'),
    ]

    TIPOS_GESTORES = ('admin', 'diretor', 'gerente')

    telefone = models.CharField(max_length=20, blank=True)
    tipo = models.CharField(max_length=20, choices=TIPO_CHOICES, default='corretor')

    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'usuario'
        indexes = [
            models.Index(fields=['tipo'], name='usuario_tipo_idx'),
        ]

    @property
    def is_gestor(self):
        return self.tipo in self.TIPOS_GESTORES

    def __str__(self):
        nome_completo = self.get_full_name()
        if nome_completo:
            return f"{nome_completo} ({self.get_tipo_display()})"
        return self.username


class StatusKanban(models.TextChoices):
    """Colunas do quadro X1 de acompanhamento de corretores"""

    AGENDAR = 'agendar', 'Agendar'
    EM_ANDAMENTO = 'em_andamento', 'Em Andamento'
    CONCLUIDO = 'concluido', 'Concluído'


class Corretor(models.Model):
    """Corretor da imobiliária"""

    STATUS_CHOICES = [
        ('ativo', 'Ativo'),
        ('inativo', 'Inativo'),
    ]

    nome = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    usuario = models.OneToOneField(
        Usuario,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='corretor'
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='ativo')
    status_kanban = models.CharField(
        max_length=20,
        choices=StatusKanban.choices,
        default=StatusKanban.AGENDAR
    )
    avatar_url = models.URLField(blank=True)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'corretor'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class EtapaProcesso(models.Model):
    """
    Etapa do processo de venda

    Serve de coluna tanto para o quadro de acompanhamento de vendas
    quanto para o quadro de tarefas dos corretores.
    """

    ETAPAS_PADRAO = [
        ('APROVAÇÃO', '#EAB308'),
        ('AGUARDANDO AVALIAÇÃO', '#F97316'),
        ('FORMULÁRIO', '#3B82F6'),
        ('AGUARDANDO VERBA', '#A855F7'),
        ('CARTÓRIO', '#6366F1'),
        ('FINALIZADO', '#22C55E'),
    ]

    titulo = models.CharField(max_length=100)
    cor = models.CharField(max_length=7, default='#6B7280')
    ordem = models.IntegerField(default=0)
    padrao = models.BooleanField(default=False)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'etapa_processo'
        ordering = ['ordem', 'titulo']

    def __str__(self):
        return self.titulo

    @classmethod
    def criar_etapas_padrao(cls):
        """Cria as etapas padrão se ainda não houver nenhuma"""
        if cls.objects.exists():
            return []
        return [
            cls.objects.create(titulo=titulo, cor=cor, ordem=idx, padrao=True)
            for idx, (titulo, cor) in enumerate(cls.ETAPAS_PADRAO)
        ]

    def is_ultima(self):
        """Verifica se é a última etapa do processo"""
        return not EtapaProcesso.objects.filter(ordem__gt=self.ordem).exists()


class Venda(models.Model):
    """Venda registrada por um corretor"""

    STATUS_CHOICES = [
        ('pendente', 'Pendente'),
        ('confirmada', 'Confirmada'),
        ('cancelada', 'Cancelada'),
    ]

    corretor = models.ForeignKey(
        Corretor,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='vendas'
    )
    cliente = models.CharField(max_length=200)
    imovel = models.CharField(max_length=200, blank=True)
    vgv = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Valor Geral de Vendas"
    )
    vgc = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Valor Geral de Comissão"
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pendente')
    data_venda = models.DateField(null=True, blank=True)
    etapa = models.ForeignKey(
        EtapaProcesso,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='vendas'
    )
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'venda'
        ordering = ['-data_venda', '-criado_em']

    def __str__(self):
        return f"{self.cliente} - {self.imovel or 'sem imóvel'}"


class TarefaCorretor(models.Model):
    """Tarefa do quadro Kanban de um corretor"""

    PRIORIDADE_CHOICES = [
        ('baixa', '🟢 Baixa'),
        ('media', '🟡 Média'),
        ('alta', '🔴 Alta'),
    ]

    corretor = models.ForeignKey(
        Corretor,
        on_delete=models.CASCADE,
        related_name='tarefas'
    )
    coluna = models.ForeignKey(
        EtapaProcesso,
        on_delete=models.PROTECT,
        related_name='tarefas'
    )
    titulo = models.CharField(max_length=200)
    descricao = models.TextField(blank=True)
    prazo = models.DateField(null=True, blank=True)
    prioridade = models.CharField(max_length=10, choices=PRIORIDADE_CHOICES, default='media')
    referencia_imovel = models.CharField(max_length=200, blank=True)
    criado_por = models.ForeignKey(
        Usuario,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tarefas_criadas'
    )
    concluida_em = models.DateTimeField(null=True, blank=True)
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tarefa_corretor'
        ordering = ['-criado_em']

    def __str__(self):
        return f"{self.titulo} ({self.corretor.nome})"


class HistoricoTarefa(models.Model):
    """Registro de alterações de uma tarefa"""

    ACAO_CHOICES = [
        ('criada', 'Criada'),
        ('movida', 'Movida'),
        ('atualizada', 'Atualizada'),
    ]

    tarefa = models.ForeignKey(
        TarefaCorretor,
        on_delete=models.CASCADE,
        related_name='historico'
    )
    usuario = models.ForeignKey(
        Usuario,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='historico_tarefas'
    )
    acao = models.CharField(max_length=20, choices=ACAO_CHOICES)
    valor_anterior = models.CharField(max_length=200, blank=True)
    valor_novo = models.CharField(max_length=200, blank=True)
    criado_em = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'historico_tarefa'
        ordering = ['-criado_em', '-id']

    def __str__(self):
        return f"{self.tarefa.titulo} - {self.get_acao_display()}"


class MetaMensal(models.Model):
    """
    Meta de faturamento de um mês

    A meta anual não é persistida: é a soma das doze metas mensais do ano.
    """

    ano = models.IntegerField()
    mes = models.IntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    valor_meta = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(0)]
    )
    criado_em = models.DateTimeField(auto_now_add=True)
    atualizado_em = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'meta_mensal'
        ordering = ['ano', 'mes']
        constraints = [
            models.UniqueConstraint(fields=['ano', 'mes'], name='meta_mensal_unica_por_mes'),
        ]

    def __str__(self):
        return f"Meta {self.mes:02d}/{self.ano}: {self.valor_meta}"
