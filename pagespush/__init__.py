"""
pagespush — Publica un sitio estático ya generado en gh-pages.

Este paquete contiene:
- publishing/  → Publisher, operaciones Git y copia espejo
- utils/       → Logger (Rich) y validadores
- config.py    → Convenciones y variables PAGESPUSH_*
- cli.py       → Comando de línea (Click)

Uso:
    cd mi-proyecto && pagespush
    python -m pagespush
"""

__version__ = "1.0.0"
