"""
__main__.py — Permite ejecutar pagespush como módulo.

    python -m pagespush
"""

from pagespush.cli import main

if __name__ == "__main__":
    main()
