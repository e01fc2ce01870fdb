# cli.py

"""
Точка входа для запуска SiteAudit без установки пакета.

Пример запуска:
    python cli.py --config configs/default.yaml --limit 5 audit --html reports/index.html
"""
from site_audit.cli import cli

if __name__ == '__main__':
    cli()
