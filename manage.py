#!/usr/bin/env python
"""
Django's command-line utility for administrative tasks.

Gestão Imobiliária - quadros Kanban e Meta Gestão
"""

import os
import sys


def main():
    """Run administrative tasks."""

    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    # Setup inicial: migrações, estáticos e etapas padrão
    if len(sys.argv) > 1 and sys.argv[1] == 'setup':
        print("🚀 Configurando Gestão Imobiliária...")

        print("📊 Aplicando migrações...")
        if os.system(f'{sys.executable} manage.py migrate') != 0:
            print("❌ Erro nas migrações")
            return

        print("📁 Coletando arquivos estáticos...")
        os.system(f'{sys.executable} manage.py collectstatic --noinput')

        print("🌱 Criando etapas padrão...")
        os.system(f'{sys.executable} manage.py seed')

        print("✅ Setup concluído! Crie um gestor com: manage.py createsuperuser")
        return

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
