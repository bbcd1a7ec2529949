# apps/core/signals.py

import logging
from django.db.models.signals import post_save, pre_save, post_delete
from django.dispatch import receiver
from django.utils import timezone
from .cache import colecao_alterada, invalidar_colecao
from .models import TarefaCorretor, HistoricoTarefa
from .repositorio import RepositorioDjango

logger = logging.getLogger(__name__)

COLECAO_POR_MODELO = {modelo: nome for nome, modelo in RepositorioDjango.COLECOES.items()}


@receiver(post_save)
@receiver(post_delete)
def avisar_colecao_alterada(sender, **kwargs):
    """
    Invalida o cache da coleção e avisa os assinantes
    sempre que um model exposto pelo repositório é gravado ou removido
    """
    colecao = COLECAO_POR_MODELO.get(sender)
    if colecao is None:
        return
    invalidar_colecao(colecao)
    colecao_alterada.send(sender=colecao)


@receiver(pre_save, sender=TarefaCorretor)
def detectar_mudanca_coluna(sender, instance, **kwargs):
    """
    Guarda a coluna anterior e controla a data de conclusão
    quando a tarefa muda de coluna
    """
    instance._coluna_anterior = None
    if not instance.pk:
        return

    try:
        anterior = sender.objects.select_related('coluna').get(pk=instance.pk)
    except sender.DoesNotExist:
        return

    if anterior.coluna_id == instance.coluna_id:
        return

    instance._coluna_anterior = anterior.coluna

    # Entrou na última etapa: concluída. Saiu dela: reaberta.
    if instance.coluna.is_ultima():
        instance.concluida_em = timezone.now()
    else:
        instance.concluida_em = None


@receiver(post_save, sender=TarefaCorretor)
def registrar_historico_tarefa(sender, instance, created, **kwargs):
    """Registra criação e movimentação da tarefa no histórico"""
    if created:
        HistoricoTarefa.objects.create(
            tarefa=instance,
            usuario=instance.criado_por,
            acao='criada',
            valor_novo=instance.titulo[:200]
        )
        return

    coluna_anterior = getattr(instance, '_coluna_anterior', None)
    if coluna_anterior is None:
        return

    HistoricoTarefa.objects.create(
        tarefa=instance,
        acao='movida',
        valor_anterior=coluna_anterior.titulo,
        valor_novo=instance.coluna.titulo
    )
    instance._coluna_anterior = None

    if instance.concluida_em:
        logger.info(f"🏁 Tarefa '{instance.titulo}' concluída")
