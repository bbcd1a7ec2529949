# apps/core/management/commands/seed.py

from datetime import date
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.core.cache import CacheColecoes
from apps.core.models import Corretor, EtapaProcesso, StatusKanban, TarefaCorretor, Venda
from apps.core.notificacoes import NotificadorAcumulado
from apps.core.repositorio import ErroPersistencia, RepositorioDjango
from apps.metas.services import salvar_meta_anual


class Command(BaseCommand):
    help = 'Cria as etapas padrão do processo e, opcionalmente, dados de demonstração e metas'

    CORRETORES_DEMO = [
        ('Ana Souza', 'ana@imobiliaria.local', StatusKanban.EM_ANDAMENTO),
        ('Bruno Lima', 'bruno@imobiliaria.local', StatusKanban.AGENDAR),
        ('Carla Mendes', 'carla@imobiliaria.local', StatusKanban.CONCLUIDO),
    ]

    def add_arguments(self, parser):
        parser.add_argument(
            '--demo',
            action='store_true',
            help='Cria corretores, vendas e tarefas de demonstração (somente DEBUG)'
        )
        parser.add_argument(
            '--meta-anual',
            type=Decimal,
            help='Grava a progressão mensal desta meta anual'
        )
        parser.add_argument(
            '--ano',
            type=int,
            default=date.today().year,
            help='Ano das metas (padrão: ano atual)'
        )

    def handle(self, *args, **options):
        self.stdout.write('🌱 Preparando dados iniciais...')

        etapas = EtapaProcesso.criar_etapas_padrao()
        if etapas:
            self.stdout.write(self.style.SUCCESS(f'  ✅ {len(etapas)} etapas padrão criadas'))
        else:
            self.stdout.write('  ℹ️  Etapas já existentes, nada a criar')

        if options['demo']:
            if not settings.DEBUG:
                raise CommandError('🚫 Dados de demonstração só podem ser criados em modo DEBUG')
            self._criar_demo(options['ano'])

        if options['meta_anual'] is not None:
            self._salvar_metas(options['ano'], options['meta_anual'])

        self.stdout.write(self.style.SUCCESS('\n✅ Seed concluído'))

    @transaction.atomic
    def _criar_demo(self, ano):
        primeira, ultima = EtapaProcesso.objects.first(), EtapaProcesso.objects.last()

        for idx, (nome, email, status_kanban) in enumerate(self.CORRETORES_DEMO):
            corretor, criado = Corretor.objects.get_or_create(
                email=email,
                defaults={'nome': nome, 'status_kanban': status_kanban}
            )
            if not criado:
                continue

            Venda.objects.create(
                corretor=corretor,
                cliente=f'Cliente {idx + 1}',
                imovel=f'Apartamento {101 + idx}',
                vgv=Decimal('450000.00') * (idx + 1),
                vgc=Decimal('22500.00') * (idx + 1),
                status='confirmada',
                data_venda=date(ano, idx + 1, 15),
                etapa=ultima,
            )
            TarefaCorretor.objects.create(
                corretor=corretor,
                coluna=primeira,
                titulo=f'Visita com cliente {idx + 1}',
                prioridade=['alta', 'media', 'baixa'][idx],
            )
            self.stdout.write(f'  👤 Corretor {nome} criado com venda e tarefa')

    def _salvar_metas(self, ano, meta_anual):
        notificador = NotificadorAcumulado()
        try:
            resultado = salvar_meta_anual(ano, meta_anual, RepositorioDjango(), notificador, CacheColecoes())
        except ValidationError as e:
            raise CommandError('; '.join(e.messages))
        except ErroPersistencia as e:
            raise CommandError(f'❌ Erro ao carregar metas de {ano}: {e}')

        if not resultado.sucesso:
            raise CommandError(f'❌ Meta de {resultado.mes_com_erro:02d}/{ano} não foi salva: {resultado.erro}')

        self.stdout.write(self.style.SUCCESS(
            f'  🎯 Metas {ano}: {len(resultado.criados)} criadas, '
            f'{len(resultado.atualizados)} atualizadas, {len(resultado.ignorados)} sem alteração'
        ))
