"""
Management command to run the stock automation tasks.

Usage:
    python manage.py run_stock_tasks --list
    python manage.py run_stock_tasks stock_status expiry_check
    python manage.py run_stock_tasks --all
    python manage.py run_stock_tasks --serve
"""

import asyncio

from django.core.management.base import BaseCommand, CommandError

from stockwatch.scheduler import Scheduler


class Command(BaseCommand):
    """Run stock automation tasks once, or keep the scheduler running."""

    help = 'Executa as tarefas de monitoramento de estoque'

    def add_arguments(self, parser):
        parser.add_argument(
            'tasks',
            nargs='*',
            help='Nomes das tarefas a executar'
        )
        parser.add_argument(
            '--all',
            action='store_true',
            help='Executa todas as tarefas uma vez'
        )
        parser.add_argument(
            '--list',
            action='store_true',
            help='Lista as tarefas e seus intervalos'
        )
        parser.add_argument(
            '--serve',
            action='store_true',
            help='Mantém o agendador rodando até ser interrompido'
        )

    def handle(self, *args, **options):
        scheduler = Scheduler()

        if options['list']:
            for name, interval in scheduler.intervals.items():
                self.stdout.write(f'{name}: a cada {interval:g}s')
            return

        if options['serve']:
            self.stdout.write('Agendador iniciado (Ctrl+C para parar)')
            try:
                asyncio.run(self._serve(scheduler))
            except KeyboardInterrupt:
                self.stdout.write('Agendador interrompido')
            return

        if options['all']:
            names = list(scheduler.tasks)
        else:
            names = options['tasks']
            if not names:
                raise CommandError('Informe ao menos uma tarefa, ou use --all / --list')
            unknown = [name for name in names if name not in scheduler.tasks]
            if unknown:
                raise CommandError(f'Tarefa(s) desconhecida(s): {", ".join(unknown)}')

        results = asyncio.run(self._run(scheduler, names))

        failed = [name for name, ok in results.items() if not ok]
        for name, ok in results.items():
            if ok:
                self.stdout.write(self.style.SUCCESS(f'{name}: ok'))
            else:
                self.stdout.write(self.style.ERROR(f'{name}: falhou'))
        if failed:
            raise CommandError(f'{len(failed)} tarefa(s) falharam')

    async def _run(self, scheduler, names):
        return {name: await scheduler.run_task(name) for name in names}

    async def _serve(self, scheduler):
        scheduler.start()
        try:
            await asyncio.Event().wait()
        finally:
            scheduler.stop()
